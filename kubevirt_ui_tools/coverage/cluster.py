"""Cluster inspection helpers for KubeVirt test environments.

The ``client`` handed to these functions must provide:

* ``list(group, version, resource, namespace=None, label_selector=None)``
* ``get_namespaced(group, version, resource, namespace, name)``
* ``get_events(namespace, name, kind)``

Each returns decoded JSON and raises an exception on failure.
"""

from __future__ import annotations

import logging
import subprocess
from datetime import datetime, timezone
from typing import Any

log = logging.getLogger(__name__)

_TEST_NAMESPACE_PREFIX = "pw-"


def _dig(value: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _str_at(value: Any, *keys: str, default: str = "") -> str:
    found = _dig(value, *keys)
    return found if isinstance(found, str) else default


def _items(listing: Any) -> list:
    items = _dig(listing, "items")
    return items if isinstance(items, list) else []


def _format_hours(hours: float) -> str:
    if float(hours).is_integer():
        return str(int(hours))
    return repr(float(hours))


def age_hours_from_timestamp(timestamp: str) -> float:
    """Hours elapsed since an RFC 3339 timestamp; 0.0 when it cannot be parsed."""
    text = timestamp.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        return 0.0
    seconds = int((datetime.now(timezone.utc) - parsed).total_seconds())
    return seconds / 3600.0


def get_cluster_info(client) -> dict:
    """Node count plus Kubernetes, KubeVirt and CNV versions."""
    info: dict[str, Any] = {}

    try:
        nodes = client.list("", "v1", "nodes", None, None)
    except Exception as exc:  # noqa: BLE001 - any client failure is reported
        log.warning("Could not list nodes: %s", exc)
        info["nodeCount"] = "error"
        info["kubernetesVersion"] = f"error: {exc}"
    else:
        items = _items(nodes)
        info["nodeCount"] = len(items)
        if items:
            info["kubernetesVersion"] = _str_at(
                items[0], "status", "nodeInfo", "kubeletVersion", default="unknown"
            )

    try:
        hco = client.get_namespaced(
            "hco.kubevirt.io",
            "v1beta1",
            "hyperconvergeds",
            "kubevirt-hyperconverged",
            "kubevirt-hyperconverged",
        )
    except Exception:  # noqa: BLE001
        info["kubevirtVersion"] = "not found"
        info["cnvVersion"] = "not found"
    else:
        versions = _dig(hco, "status", "versions")
        versions = versions if isinstance(versions, list) else []

        def version_of(name: str) -> str:
            entry = next((v for v in versions if _dig(v, "name") == name), None)
            return _str_at(entry, "version", default="unknown")

        info["kubevirtVersion"] = version_of("kubevirt")
        info["cnvVersion"] = version_of("operator")

    return info


def list_vms(client, namespace: str | None = None) -> dict:
    """Summaries of virtual machines in one namespace or all of them."""
    try:
        listing = client.list("kubevirt.io", "v1", "virtualmachines", namespace, None)
    except Exception as exc:  # noqa: BLE001
        return {"error": f"Failed to list VMs: {exc}"}

    vms = []
    for vm in _items(listing):
        domain = _dig(vm, "spec", "template", "spec", "domain")
        vms.append(
            {
                "name": _str_at(vm, "metadata", "name"),
                "namespace": _str_at(vm, "metadata", "namespace"),
                "status": _str_at(vm, "status", "printableStatus", default="Unknown"),
                "cpu": _dig(domain, "cpu"),
                "memory": _str_at(domain, "resources", "requests", "memory", default="unknown"),
                "runStrategy": _str_at(vm, "spec", "runStrategy"),
            }
        )
    return {"vms": vms, "count": len(vms)}


def get_vm_detail(client, namespace: str, name: str) -> dict:
    """The VM object with its running instance and events, where available."""
    try:
        vm = client.get_namespaced("kubevirt.io", "v1", "virtualmachines", namespace, name)
    except Exception as exc:  # noqa: BLE001
        return {"error": f"Failed to get VM {namespace}/{name}: {exc}"}

    try:
        vmi = client.get_namespaced(
            "kubevirt.io", "v1", "virtualmachineinstances", namespace, name
        )
    except Exception:  # noqa: BLE001
        vmi = None
    try:
        events = client.get_events(namespace, name, "VirtualMachine")
    except Exception:  # noqa: BLE001
        events = None
    return {"vm": vm, "vmi": vmi, "events": events}


def list_test_namespaces(client) -> dict:
    """``pw-*`` namespaces with phase and age, oldest first."""
    try:
        listing = client.list("", "v1", "namespaces", None, None)
    except Exception as exc:  # noqa: BLE001
        return {"error": f"Failed to list namespaces: {exc}"}

    namespaces = []
    for ns in _items(listing):
        name = _dig(ns, "metadata", "name")
        if not isinstance(name, str) or not name.startswith(_TEST_NAMESPACE_PREFIX):
            continue
        created = _str_at(ns, "metadata", "creationTimestamp")
        namespaces.append(
            {
                "name": name,
                "status": _str_at(ns, "status", "phase", default="Unknown"),
                "created": created,
                "ageHours": age_hours_from_timestamp(created) if created else 0.0,
            }
        )

    namespaces.sort(key=lambda ns: ns["ageHours"], reverse=True)
    return {"count": len(namespaces), "namespaces": namespaces}


def cleanup_stale_namespaces(client, older_than_hours: float = 4.0) -> dict:
    """Delete test namespaces older than the threshold with ``oc delete``."""
    namespaces = list_test_namespaces(client).get("namespaces")
    if not isinstance(namespaces, list):
        return {"error": "Could not list test namespaces"}

    stale = [ns for ns in namespaces if ns["ageHours"] > older_than_hours]
    if not stale:
        return {
            "message": (
                f"No stale namespaces older than {_format_hours(older_than_hours)}h found"
            ),
            "deleted": [],
            "failed": [],
        }

    deleted: list[str] = []
    failed: list[dict] = []
    for ns in stale:
        name = ns["name"]
        try:
            completed = subprocess.run(
                ["oc", "delete", "namespace", name, "--wait=false"],
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            failed.append({"name": name, "error": str(exc)})
            continue
        if completed.returncode == 0:
            deleted.append(name)
        else:
            stderr = completed.stderr
            if isinstance(stderr, bytes):
                stderr = stderr.decode("utf-8", errors="replace")
            failed.append({"name": name, "error": stderr or ""})

    return {
        "message": f"Cleaned up {len(deleted)} of {len(stale)} stale namespaces",
        "deleted": deleted,
        "failed": failed,
    }


def _running(pods) -> int:
    return sum(1 for pod in pods if _dig(pod, "status", "phase") == "Running")


def _node_ready(node) -> bool:
    conditions = _dig(node, "status", "conditions")
    if not isinstance(conditions, list):
        return False
    return any(
        _dig(c, "type") == "Ready" and _dig(c, "status") == "True" for c in conditions
    )


def check_cluster_health(client) -> dict:
    """Pre-flight checks of the API server, CNV components, storage and nodes."""
    checks: list[dict] = []

    try:
        client.list("", "v1", "namespaces", None, None)
    except Exception as exc:  # noqa: BLE001
        checks.append({"check": "API Server", "status": "error", "detail": str(exc)})
        return {"healthy": False, "checks": checks}
    checks.append({"check": "API Server", "status": "ok", "detail": "Reachable"})

    try:
        pods = _items(client.list("", "v1", "pods", "openshift-cnv", None))
    except Exception:  # noqa: BLE001
        checks.append(
            {
                "check": "CNV Operator",
                "status": "warning",
                "detail": "Could not check openshift-cnv namespace",
            }
        )
    else:
        operator_pods = [
            p
            for p in pods
            if "hyperconverged" in _str_at(p, "metadata", "name")
            or "hco-operator" in _str_at(p, "metadata", "name")
        ]
        running = _running(operator_pods)
        checks.append(
            {
                "check": "CNV Operator",
                "status": "ok" if running > 0 else "warning",
                "detail": f"{running} pod(s) running",
            }
        )

    try:
        pods = _items(client.list("", "v1", "pods", "openshift-cnv", None))
    except Exception:  # noqa: BLE001
        checks.append({"check": "virt-api", "status": "warning", "detail": "Could not check"})
    else:
        virt_api = [p for p in pods if _str_at(p, "metadata", "name").startswith("virt-api")]
        running = _running(virt_api)
        checks.append(
            {
                "check": "virt-api",
                "status": "ok" if running > 0 else "warning",
                "detail": f"{running}/{len(virt_api)} pods running",
            }
        )

    try:
        classes = _items(client.list("storage.k8s.io", "v1", "storageclasses", None, None))
    except Exception:  # noqa: BLE001
        checks.append(
            {
                "check": "Storage Classes",
                "status": "warning",
                "detail": "Could not list storage classes",
            }
        )
    else:
        names = [n for n in (_dig(s, "metadata", "name") for s in classes) if isinstance(n, str)]
        has_virt = any("ceph" in n or "rbd" in n or "virt" in n for n in names)
        checks.append(
            {
                "check": "Storage Classes",
                "status": "ok" if has_virt else "warning",
                "detail": f"{len(names)} classes found",
            }
        )

    try:
        nodes = _items(client.list("", "v1", "nodes", None, None))
    except Exception:  # noqa: BLE001
        checks.append({"check": "Nodes", "status": "warning", "detail": "Could not list nodes"})
    else:
        ready = sum(1 for n in nodes if _node_ready(n))
        checks.append(
            {
                "check": "Nodes",
                "status": "ok" if ready == len(nodes) else "warning",
                "detail": f"{ready}/{len(nodes)} nodes ready",
            }
        )

    healthy = all(c["status"] != "error" for c in checks)
    return {"healthy": healthy, "checks": checks}