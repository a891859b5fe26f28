import pytest
import yaml

from akoflow.nfs_server import (
    ClusterRoleBinding,
    Container,
    ContainerPort,
    Deployment,
    DeploymentSpec,
    EnvVar,
    EnvVarSource,
    Metadata,
    ObjectFieldSelector,
    PodSpec,
    PodTemplate,
    PolicyRule,
    RoleRef,
    Service,
    ServiceAccount,
    ServicePort,
    ServiceSpec,
    StorageClass,
    Subject,
    to_manifest,
    to_yaml,
)


def test_service_account_keys_and_omitted_labels():
    account = ServiceAccount(api_version="v1", kind="ServiceAccount", metadata=Metadata(namespace="ns", name="nfs"))
    manifest = to_manifest(account)
    assert manifest == {
        "apiVersion": "v1",
        "kind": "ServiceAccount",
        "metadata": {"namespace": "ns", "name": "nfs"},
    }


def test_labels_present_when_set():
    meta = Metadata(namespace="ns", name="nfs", labels={"app": "nfs"})
    assert to_manifest(meta)["labels"] == {"app": "nfs"}


def test_service_port_protocol_omitted_when_empty():
    service = Service(
        api_version="v1",
        kind="Service",
        spec=ServiceSpec(ports=[ServicePort(name="nfs", port=2049), ServicePort(name="rpc", port=111, protocol="UDP")]),
    )
    ports = to_manifest(service)["spec"]["ports"]
    assert "protocol" not in ports[0]
    assert ports[1]["protocol"] == "UDP"
    assert ports[0]["port"] == 2049


def test_env_var_value_from_nested():
    env = EnvVar(name="POD_IP", value_from=EnvVarSource(field_ref=ObjectFieldSelector(field_path="status.podIP")))
    manifest = to_manifest(env)
    assert manifest == {"name": "POD_IP", "valueFrom": {"fieldRef": {"fieldPath": "status.podIP"}}}


def test_env_var_value_without_source():
    manifest = to_manifest(EnvVar(name="A", value="1"))
    assert manifest == {"name": "A", "value": "1"}


def test_policy_rule_resource_names_optional():
    rule = PolicyRule(api_groups=[""], resources=["services"], verbs=["get"])
    assert "resourceNames" not in to_manifest(rule)
    rule.resource_names = ["nfs"]
    assert to_manifest(rule)["resourceNames"] == ["nfs"]


def test_deployment_yaml_round_trip():
    deployment = Deployment(
        api_version="apps/v1",
        kind="Deployment",
        metadata=Metadata(namespace="ns", name="nfs-provisioner"),
        spec=DeploymentSpec(
            replicas=1,
            template=PodTemplate(
                spec=PodSpec(
                    service_account_name="nfs",
                    containers=[
                        Container(
                            name="nfs",
                            image="nfs-image",
                            ports=[ContainerPort(name="nfs", container_port=2049)],
                            args=["-provisioner=example.com/nfs"],
                        )
                    ],
                )
            ),
        ),
    )
    text = to_yaml(deployment)
    assert yaml.safe_load(text) == to_manifest(deployment)
    loaded = yaml.safe_load(text)
    assert loaded["spec"]["template"]["spec"]["containers"][0]["ports"][0]["containerPort"] == 2049
    assert loaded["spec"]["template"]["spec"]["serviceAccountName"] == "nfs"


def test_cluster_role_binding_role_ref_keys():
    binding = ClusterRoleBinding(
        api_version="rbac.authorization.k8s.io/v1",
        kind="ClusterRoleBinding",
        subjects=[Subject(kind="ServiceAccount", name="nfs", namespace="ns")],
        role_ref=RoleRef(kind="ClusterRole", name="nfs-runner", api_group="rbac.authorization.k8s.io"),
    )
    manifest = to_manifest(binding)
    assert manifest["roleRef"]["apiGroup"] == "rbac.authorization.k8s.io"
    assert manifest["subjects"][0]["namespace"] == "ns"


def test_storage_class_mount_options():
    storage_class = StorageClass(kind="StorageClass", provisioner="example.com/nfs", mount_options=["vers=4.1"])
    manifest = to_manifest(storage_class)
    assert manifest["mountOptions"] == ["vers=4.1"]
    assert manifest["provisioner"] == "example.com/nfs"


def test_to_manifest_rejects_non_resource():
    with pytest.raises(TypeError):
        to_manifest({"kind": "Service"})
    with pytest.raises(TypeError):
        to_manifest(Service)