from datetime import datetime, timedelta, timezone
from subprocess import CompletedProcess
from unittest import mock

from kubevirt_ui_tools.coverage import cluster


class FakeKube:
    def __init__(self, lists=None, objects=None, events=None):
        self.lists = lists or {}
        self.objects = objects or {}
        self.events = events
        self.list_calls = []

    def _resolve(self, value, key):
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise RuntimeError(f"not found: {key}")
        return value

    def list(self, group, version, resource, namespace=None, label_selector=None):
        key = (group, version, resource, namespace)
        self.list_calls.append(key)
        return self._resolve(self.lists.get(key), key)

    def get_namespaced(self, group, version, resource, namespace, name):
        key = (group, version, resource, namespace, name)
        return self._resolve(self.objects.get(key), key)

    def get_events(self, namespace, name, kind):
        return self._resolve(self.events, (namespace, name, kind))


def _ts(hours_ago):
    moment = datetime.now(timezone.utc) - timedelta(hours=hours_ago)
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def _ns(name, hours_ago, phase="Active"):
    return {
        "metadata": {"name": name, "creationTimestamp": _ts(hours_ago)},
        "status": {"phase": phase},
    }


NODES_KEY = ("", "v1", "nodes", None)
NS_KEY = ("", "v1", "namespaces", None)
PODS_KEY = ("", "v1", "pods", "openshift-cnv")
SC_KEY = ("storage.k8s.io", "v1", "storageclasses", None)
HCO_KEY = (
    "hco.kubevirt.io",
    "v1beta1",
    "hyperconvergeds",
    "kubevirt-hyperconverged",
    "kubevirt-hyperconverged",
)


def test_age_hours_unparseable_is_zero():
    assert cluster.age_hours_from_timestamp("not a timestamp") == 0.0


def test_age_hours_recent_timestamp():
    age = cluster.age_hours_from_timestamp(_ts(2))
    assert abs(age - 2) < 0.01


def test_cluster_info_versions():
    node = {"status": {"nodeInfo": {"kubeletVersion": "v1.30.0"}}}
    hco = {
        "status": {
            "versions": [
                {"name": "operator", "version": "4.22.0"},
                {"name": "kubevirt", "version": "v1.5.0"},
            ]
        }
    }
    client = FakeKube(lists={NODES_KEY: {"items": [node, node]}}, objects={HCO_KEY: hco})
    info = cluster.get_cluster_info(client)
    assert info["nodeCount"] == 2
    assert info["kubernetesVersion"] == "v1.30.0"
    assert info["kubevirtVersion"] == "v1.5.0"
    assert info["cnvVersion"] == "4.22.0"


def test_cluster_info_failures():
    client = FakeKube(lists={NODES_KEY: RuntimeError("boom")})
    info = cluster.get_cluster_info(client)
    assert info["nodeCount"] == "error"
    assert info["kubernetesVersion"] == "error: boom"
    assert info["kubevirtVersion"] == "not found"
    assert info["cnvVersion"] == "not found"


def test_cluster_info_missing_versions_are_unknown():
    client = FakeKube(lists={NODES_KEY: {"items": [{}]}}, objects={HCO_KEY: {}})
    info = cluster.get_cluster_info(client)
    assert info["kubernetesVersion"] == "unknown"
    assert info["kubevirtVersion"] == "unknown"


def test_list_vms_summaries():
    vm = {
        "metadata": {"name": "vm-a", "namespace": "ns1"},
        "status": {"printableStatus": "Running"},
        "spec": {
            "runStrategy": "Always",
            "template": {
                "spec": {
                    "domain": {
                        "cpu": {"cores": 2},
                        "resources": {"requests": {"memory": "2Gi"}},
                    }
                }
            },
        },
    }
    client = FakeKube(lists={("kubevirt.io", "v1", "virtualmachines", "ns1"): {"items": [vm, {}]}})
    result = cluster.list_vms(client, "ns1")
    assert result["count"] == 2
    first, second = result["vms"]
    assert first == {
        "name": "vm-a",
        "namespace": "ns1",
        "status": "Running",
        "cpu": {"cores": 2},
        "memory": "2Gi",
        "runStrategy": "Always",
    }
    assert second["status"] == "Unknown"
    assert second["memory"] == "unknown"
    assert second["cpu"] is None


def test_list_vms_error():
    client = FakeKube()
    result = cluster.list_vms(client, None)
    assert result["error"].startswith("Failed to list VMs: ")


def test_vm_detail_without_vmi():
    vm = {"metadata": {"name": "vm-a"}}
    client = FakeKube(objects={("kubevirt.io", "v1", "virtualmachines", "ns", "vm-a"): vm})
    result = cluster.get_vm_detail(client, "ns", "vm-a")
    assert result == {"vm": vm, "vmi": None, "events": None}


def test_vm_detail_missing_vm():
    result = cluster.get_vm_detail(FakeKube(), "ns", "vm-a")
    assert result["error"].startswith("Failed to get VM ns/vm-a: ")


def test_list_test_namespaces_filters_and_sorts():
    listing = {
        "items": [
            _ns("pw-young", 1),
            _ns("default", 100),
            _ns("pw-old", 10, phase="Terminating"),
            {"metadata": {"name": "pw-nodate"}},
        ]
    }
    result = cluster.list_test_namespaces(FakeKube(lists={NS_KEY: listing}))
    names = [ns["name"] for ns in result["namespaces"]]
    assert names == ["pw-old", "pw-young", "pw-nodate"]
    assert result["count"] == len(names)
    assert result["namespaces"][0]["status"] == "Terminating"
    assert result["namespaces"][2]["status"] == "Unknown"
    assert result["namespaces"][2]["ageHours"] == 0.0


def test_cleanup_nothing_stale():
    client = FakeKube(lists={NS_KEY: {"items": [_ns("pw-a", 1)]}})
    with mock.patch("kubevirt_ui_tools.coverage.cluster.subprocess.run") as run:
        result = cluster.cleanup_stale_namespaces(client, 4.0)
    assert result["message"] == "No stale namespaces older than 4h found"
    assert result["deleted"] == []
    run.assert_not_called()


def test_cleanup_deletes_and_reports_failures():
    client = FakeKube(lists={NS_KEY: {"items": [_ns("pw-a", 10), _ns("pw-b", 20), _ns("pw-c", 1)]}})

    def fake_run(args, **kwargs):
        name = args[3]
        if name == "pw-b":
            return CompletedProcess(args, 1, b"", b"forbidden")
        return CompletedProcess(args, 0, b"", b"")

    with mock.patch("kubevirt_ui_tools.coverage.cluster.subprocess.run", side_effect=fake_run) as run:
        result = cluster.cleanup_stale_namespaces(client, 4.0)
    assert result["deleted"] == ["pw-a"]
    assert result["failed"] == [{"name": "pw-b", "error": "forbidden"}]
    assert result["message"] == "Cleaned up 1 of 2 stale namespaces"
    called = [call.args[0] for call in run.call_args_list]
    assert ["oc", "delete", "namespace", "pw-a", "--wait=false"] in called


def test_cleanup_when_listing_fails():
    result = cluster.cleanup_stale_namespaces(FakeKube(), 4.0)
    assert result == {"error": "Could not list test namespaces"}


def test_health_api_unreachable_stops_early():
    client = FakeKube(lists={NS_KEY: RuntimeError("down")})
    result = cluster.check_cluster_health(client)
    assert result["healthy"] is False
    assert result["checks"] == [{"check": "API Server", "status": "error", "detail": "down"}]


def test_health_all_ok():
    running = {"status": {"phase": "Running"}}
    pods = {
        "items": [
            {"metadata": {"name": "hco-operator-1"}, **running},
            {"metadata": {"name": "virt-api-1"}, **running},
        ]
    }
    ready_node = {"status": {"conditions": [{"type": "Ready", "status": "True"}]}}
    client = FakeKube(
        lists={
            NS_KEY: {"items": []},
            PODS_KEY: pods,
            SC_KEY: {"items": [{"metadata": {"name": "ocs-ceph-rbd"}}]},
            NODES_KEY: {"items": [ready_node]},
        }
    )
    result = cluster.check_cluster_health(client)
    assert result["healthy"] is True
    statuses = {c["check"]: c["status"] for c in result["checks"]}
    assert set(statuses.values()) == {"ok"}
    assert list(statuses) == ["API Server", "CNV Operator", "virt-api", "Storage Classes", "Nodes"]


def test_health_warnings_still_healthy():
    client = FakeKube(
        lists={
            NS_KEY: {"items": []},
            NODES_KEY: {"items": [{"status": {"conditions": []}}]},
        }
    )
    result = cluster.check_cluster_health(client)
    assert result["healthy"] is True
    by_name = {c["check"]: c for c in result["checks"]}
    assert by_name["CNV Operator"]["detail"] == "Could not check openshift-cnv namespace"
    assert by_name["Storage Classes"]["status"] == "warning"
    assert by_name["Nodes"]["status"] == "warning"