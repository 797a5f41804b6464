"""Curated index of OpenShift Virtualization documentation sections."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DocSection:
    """A documentation page: its id, title, location and search tags."""

    id: str
    title: str
    dir: str
    file: str
    tags: tuple[str, ...]


def _s(section_id: str, title: str, directory: str, file: str, *tags: str) -> DocSection:
    return DocSection(id=section_id, title=title, dir=directory, file=file, tags=tags)


_ABOUT = "virt/about_virt"
_INSTALL = "virt/install"
_START = "virt/getting_started"
_CREATE = "virt/creating_vm"
_CREATE_ADV = "virt/creating_vms_advanced"
_MANAGE = "virt/managing_vms"
_NET = "virt/vm_networking"
_STORAGE = "virt/storage"
_MIGRATION = "virt/live_migration"
_MONITORING = "virt/monitoring"
_NODES = "virt/nodes"
_POST = "virt/post_installation_configuration"
_BACKUP = "virt/backup_restore"
_SUPPORT = "virt/support"
_RELEASE = "virt/release_notes"
_UPDATING = "virt/updating"

SECTIONS: tuple[DocSection, ...] = (
    # About
    _s("about", "About OpenShift Virtualization", _ABOUT, "about-virt.adoc",
       "overview", "features", "vsphere-comparison"),
    _s("architecture", "Architecture", _ABOUT, "virt-architecture.adoc",
       "architecture", "components", "virt-api", "virt-controller", "virt-handler"),
    _s("security-policies", "Security Policies", _ABOUT, "virt-security-policies.adoc",
       "security", "rbac", "scc", "policies"),
    _s("supported-limits", "Supported Limits", _ABOUT, "virt-supported-limits.adoc",
       "limits", "maximums", "scale"),
    # Install
    _s("installing", "Installing OpenShift Virtualization", _INSTALL, "installing-virt.adoc",
       "install", "operator", "subscription"),
    _s("requirements", "Requirements", _INSTALL, "virt-requirements.adoc",
       "requirements", "prerequisites", "hardware"),
    _s("preparing-cluster", "Preparing Cluster for Virtualization", _INSTALL,
       "preparing-cluster-for-virt.adoc", "install", "preparation", "cluster"),
    _s("uninstalling", "Uninstalling OpenShift Virtualization", _INSTALL,
       "uninstalling-virt.adoc", "uninstall", "remove"),
    # Getting started
    _s("getting-started", "Getting Started", _START, "virt-getting-started.adoc",
       "quickstart", "getting-started", "tutorial"),
    _s("cli-tools", "Using CLI Tools", _START, "virt-using-the-cli-tools.adoc",
       "cli", "virtctl", "oc"),
    # Creating VMs
    _s("vm-from-instancetypes", "Creating VMs from Instance Types", _CREATE,
       "virt-creating-vms-from-instance-types.adoc", "create", "instancetype", "catalog"),
    _s("vm-from-templates", "Creating VMs from Templates", _CREATE,
       "virt-creating-vms-from-templates.adoc", "create", "templates", "catalog"),
    _s("vm-from-cli", "Creating VMs from CLI", _CREATE_ADV, "virt-creating-vms-from-cli.adoc",
       "create", "cli", "yaml", "manifest"),
    _s("vm-from-container-disks", "Creating VMs from Container Disks", _CREATE_ADV,
       "virt-creating-vms-from-container-disks.adoc", "create", "container-disk", "registry"),
    _s("vm-from-web-images", "Creating VMs from Web Images", _CREATE_ADV,
       "virt-creating-vms-from-web-images.adoc", "create", "web-image", "url", "import"),
    _s("vm-uploading-images", "Uploading Images for VMs", _CREATE_ADV,
       "virt-creating-vms-uploading-images.adoc", "create", "upload", "image"),
    _s("vm-cloning", "Cloning VMs", _CREATE_ADV, "virt-cloning-vms.adoc", "clone", "copy"),
    _s("vm-cloning-pvcs", "Creating VMs by Cloning PVCs", _CREATE_ADV,
       "virt-creating-vms-by-cloning-pvcs.adoc", "clone", "pvc", "storage"),
    _s("vm-rh-images", "Creating VMs from Red Hat Images Overview", _CREATE_ADV,
       "virt-creating-vms-from-rh-images-overview.adoc",
       "create", "rhel", "golden-image", "boot-source"),
    _s("vm-golden-image-heterogeneous", "Golden Images on Heterogeneous Clusters", _CREATE_ADV,
       "virt-golden-image-heterogeneous-clusters.adoc",
       "golden-image", "heterogeneous", "multi-arch"),
    # Managing VMs
    _s("vm-edit", "Editing VMs", _MANAGE, "virt-edit-vms.adoc", "edit", "modify", "vm-details"),
    _s("vm-controlling-states", "Controlling VM States", _MANAGE,
       "virt-controlling-vm-states.adoc", "start", "stop", "pause", "restart", "run-strategy"),
    _s("vm-consoles", "Accessing VM Consoles", _MANAGE, "virt-accessing-vm-consoles.adoc",
       "console", "vnc", "serial", "rdp"),
    _s("vm-ssh", "Accessing VMs via SSH", _MANAGE, "virt-accessing-vm-ssh.adoc",
       "ssh", "access", "nodeport"),
    _s("vm-delete", "Deleting VMs", _MANAGE, "virt-delete-vms.adoc", "delete", "remove"),
    _s("vm-delete-protection", "VM Delete Protection", _MANAGE,
       "virt-enabling-disabling-vm-delete-protection.adoc", "delete-protection", "safety"),
    _s("vm-boot-order", "Editing Boot Order", _MANAGE, "virt-edit-boot-order.adoc",
       "boot-order", "boot", "disk-order"),
    _s("vm-export", "Exporting VMs", _MANAGE, "virt-exporting-vms.adoc", "export", "backup"),
    _s("vm-list", "Listing VMs", _MANAGE, "virt-list-vms.adoc", "list", "overview"),
    _s("vm-vmis", "Managing VMIs", _MANAGE, "virt-manage-vmis.adoc",
       "vmi", "instance", "runtime"),
    _s("vm-pipelines", "Managing VMs with OpenShift Pipelines", _MANAGE,
       "virt-managing-vms-openshift-pipelines.adoc", "pipelines", "tekton", "ci-cd"),
    _s("vm-storage-migration", "Migrating VMs to Different Storage Class", _MANAGE,
       "virt-migrating-vms-in-single-cluster-to-different-storage-class.adoc",
       "storage-migration", "storage-class", "migrate"),
    _s("vm-vtpm", "Using vTPM Devices", _MANAGE, "virt-using-vtpm-devices.adoc",
       "vtpm", "tpm", "security"),
    _s("vm-virtio-drivers", "Installing VirtIO Drivers on Windows", _MANAGE,
       "virt-install-virtio-drivers-on-windows-vms.adoc", "windows", "virtio", "drivers"),
    _s("vm-guest-agent", "Installing QEMU Guest Agent", _MANAGE,
       "virt-installing-qemu-guest-agent.adoc", "guest-agent", "qemu", "monitoring"),
    _s("vm-customize-console", "Customizing the Web Console", _MANAGE,
       "virt-customize-web-console.adoc", "web-console", "customize", "ui"),
    # Networking
    _s("networking-overview", "Networking Overview", _NET, "virt-networking-overview.adoc",
       "networking", "overview", "multus", "ovn"),
    _s("networking-pod-network", "Connecting VM to Default Pod Network", _NET,
       "virt-connecting-vm-to-default-pod-network.adoc",
       "networking", "pod-network", "masquerade"),
    _s("networking-linux-bridge", "Connecting VM to Linux Bridge", _NET,
       "virt-connecting-vm-to-linux-bridge.adoc", "networking", "linux-bridge", "bridge"),
    _s("networking-sriov", "Connecting VM to SR-IOV", _NET, "virt-connecting-vm-to-sriov.adoc",
       "networking", "sriov", "sr-iov", "passthrough"),
    _s("networking-ovn-secondary", "Connecting VM to OVN Secondary Network", _NET,
       "virt-connecting-vm-to-ovn-secondary-network.adoc",
       "networking", "ovn", "secondary", "layer2"),
    _s("networking-primary-udn", "Connecting VM to Primary UDN", _NET,
       "virt-connecting-vm-to-primary-udn.adoc", "networking", "udn", "primary"),
    _s("networking-secondary-udn", "Connecting VM to Secondary UDN", _NET,
       "virt-connecting-vm-to-secondary-udn.adoc", "networking", "udn", "secondary"),
    _s("networking-service-mesh", "Connecting VM to Service Mesh", _NET,
       "virt-connecting-vm-to-service-mesh.adoc", "networking", "service-mesh", "istio"),
    _s("networking-expose-service", "Exposing VM with a Service", _NET,
       "virt-exposing-vm-with-service.adoc",
       "networking", "service", "nodeport", "loadbalancer"),
    _s("networking-hotplug", "Hot-Plugging Network Interfaces", _NET,
       "virt-hot-plugging-network-interfaces.adoc", "networking", "hotplug", "nic"),
    _s("networking-ips", "Configuring and Viewing IPs for VMs", _NET,
       "virt-configuring-viewing-ips-for-vms.adoc", "networking", "ip", "address"),
    _s("networking-physical", "Configuring Physical Networks", _NET,
       "virt-configuring-physical-networks.adoc", "networking", "physical", "nmstate", "nncp"),
    _s("networking-fqdn", "Accessing VM Internal FQDN", _NET,
       "virt-accessing-vm-internal-fqdn.adoc", "networking", "dns", "fqdn"),
    _s("networking-secondary-fqdn", "Accessing VM Secondary Network FQDN", _NET,
       "virt-accessing-vm-secondary-network-fqdn.adoc",
       "networking", "dns", "fqdn", "secondary"),
    _s("networking-dpdk", "Using DPDK with SR-IOV", _NET, "virt-using-dpdk-with-sriov.adoc",
       "networking", "dpdk", "sriov", "performance"),
    _s("networking-mac-pool", "Using MAC Address Pool for VMs", _NET,
       "virt-using-mac-address-pool-for-vms.adoc", "networking", "mac", "address-pool"),
    _s("networking-link-state", "Setting Interface Link State", _NET,
       "virt-setting-interface-link-state.adoc", "networking", "link-state", "interface"),
    _s("networking-migration-network", "Dedicated Network for Live Migration", _NET,
       "virt-dedicated-network-live-migration.adoc",
       "networking", "migration", "dedicated-network"),
    # Storage
    _s("storage-overview", "Storage Configuration Overview", _STORAGE,
       "virt-storage-config-overview.adoc", "storage", "overview", "cdi"),
    _s("storage-profile", "Configuring Storage Profile", _STORAGE,
       "virt-configuring-storage-profile.adoc",
       "storage", "storage-profile", "access-mode", "volume-mode"),
    _s("storage-local-hpp", "Configuring Local Storage with HPP", _STORAGE,
       "virt-configuring-local-storage-with-hpp.adoc", "storage", "local", "hpp", "hostpath"),
    _s("storage-bootsource", "Automatic Boot Source Updates", _STORAGE,
       "virt-automatic-bootsource-updates.adoc",
       "storage", "boot-source", "golden-image", "auto-update"),
    _s("storage-clone-permissions", "Enabling User Permissions to Clone DataVolumes", _STORAGE,
       "virt-enabling-user-permissions-to-clone-datavolumes.adoc",
       "storage", "clone", "rbac", "datavolume"),
    _s("storage-cdi-resourcequota", "Configuring CDI for Namespace ResourceQuota", _STORAGE,
       "virt-configuring-cdi-for-namespace-resourcequota.adoc",
       "storage", "cdi", "resourcequota", "quota"),
    _s("storage-scratch-space", "Preparing CDI Scratch Space", _STORAGE,
       "virt-preparing-cdi-scratch-space.adoc", "storage", "cdi", "scratch"),
    _s("storage-fs-overhead", "Reserving PVC Space for Filesystem Overhead", _STORAGE,
       "virt-reserving-pvc-space-fs-overhead.adoc", "storage", "filesystem", "overhead", "pvc"),
    _s("storage-preallocation", "Using Preallocation for DataVolumes", _STORAGE,
       "virt-using-preallocation-for-datavolumes.adoc",
       "storage", "preallocation", "performance"),
    _s("storage-dv-annotations", "Managing Data Volume Annotations", _STORAGE,
       "virt-managing-data-volume-annotations.adoc", "storage", "datavolume", "annotations"),
    _s("storage-csi", "Storage with CSI Paradigm", _STORAGE,
       "virt-storage-with-csi-paradigm.adoc",
       "storage", "csi", "container-storage-interface"),
    # Live migration
    _s("migration-about", "About Live Migration", _MIGRATION, "virt-about-live-migration.adoc",
       "migration", "live-migration", "overview"),
    _s("migration-configuring", "Configuring Live Migration", _MIGRATION,
       "virt-configuring-live-migration.adoc", "migration", "configuration", "policy", "limits"),
    _s("migration-initiating", "Initiating Live Migration", _MIGRATION,
       "virt-initiating-live-migration.adoc", "migration", "initiate", "trigger"),
    _s("migration-cross-cluster", "Configuring Cross-Cluster Live Migration Network", _MIGRATION,
       "virt-configuring-cross-cluster-live-migration-network.adoc",
       "migration", "cross-cluster", "network"),
    _s("migration-mtv-providers", "About MTV Providers", _MIGRATION,
       "virt-about-mtv-providers.adoc", "migration", "mtv", "providers", "vmware"),
    # Monitoring
    _s("monitoring-overview", "Monitoring Overview", _MONITORING,
       "virt-monitoring-overview.adoc", "monitoring", "overview", "dashboard"),
    _s("monitoring-vm-health", "Monitoring VM Health", _MONITORING,
       "virt-monitoring-vm-health.adoc", "monitoring", "health", "liveness", "readiness"),
    _s("monitoring-prometheus", "Prometheus Queries for VMs", _MONITORING,
       "virt-prometheus-queries.adoc", "monitoring", "prometheus", "metrics", "queries"),
    _s("monitoring-custom-metrics", "Exposing Custom Metrics for VMs", _MONITORING,
       "virt-exposing-custom-metrics-for-vms.adoc", "monitoring", "metrics", "custom"),
    _s("monitoring-downward-metrics", "Exposing Downward Metrics", _MONITORING,
       "virt-exposing-downward-metrics.adoc", "monitoring", "downward-metrics", "guest"),
    _s("monitoring-runbooks", "Runbooks", _MONITORING, "virt-runbooks.adoc",
       "monitoring", "runbooks", "alerts", "troubleshooting"),
    _s("checkups-network", "Running Cluster Checkups", _MONITORING,
       "virt-running-cluster-checkups.adoc", "checkups", "network", "validation"),
    _s("checkups-storage", "Storage Checkups", _MONITORING, "virt-storage-checkups.adoc",
       "checkups", "storage", "validation"),
    # Nodes
    _s("nodes-eviction", "Eviction Strategies", _NODES, "virt-eviction-strategies.adoc",
       "nodes", "eviction", "run-strategy", "drain"),
    _s("nodes-maintenance", "Node Maintenance", _NODES, "virt-node-maintenance.adoc",
       "nodes", "maintenance", "drain", "cordon"),
    _s("nodes-cpu-models", "Managing Node Labeling for Obsolete CPU Models", _NODES,
       "virt-managing-node-labeling-obsolete-cpu-models.adoc",
       "nodes", "cpu", "labeling", "models"),
    _s("nodes-ksm", "Activating KSM", _NODES, "virt-activating-ksm.adoc",
       "nodes", "ksm", "memory", "deduplication"),
    _s("nodes-reconciliation", "Preventing Node Reconciliation", _NODES,
       "virt-preventing-node-reconciliation.adoc", "nodes", "reconciliation"),
    # Post-installation
    _s("post-install-config", "Post-Installation Configuration", _POST,
       "virt-post-install-config.adoc", "post-install", "configuration", "hco"),
    _s("post-install-network", "Post-Installation Network Configuration", _POST,
       "virt-post-install-network-config.adoc", "post-install", "networking"),
    _s("post-install-storage", "Post-Installation Storage Configuration", _POST,
       "virt-post-install-storage-config.adoc", "post-install", "storage"),
    _s("post-install-node-placement", "Node Placement for Virt Components", _POST,
       "virt-node-placement-virt-components.adoc", "post-install", "node-placement", "affinity"),
    _s("post-install-density", "Configuring Higher VM Workload Density", _POST,
       "virt-configuring-higher-vm-workload-density.adoc",
       "post-install", "density", "overcommit", "memory"),
    _s("post-install-cert-rotation", "Configuring Certificate Rotation", _POST,
       "virt-configuring-certificate-rotation.adoc", "post-install", "certificates", "tls"),
    _s("post-install-physical-cores", "Physical Cores Allocation for VMs", _POST,
       "virt-physical-cores-allocation-vms.adoc", "post-install", "cpu", "cores", "dedicated"),
    _s("post-install-redfish", "KubeVirt Redfish", _POST, "virt-kubevirt-redfish.adoc",
       "post-install", "redfish", "bmc", "ipmi"),
    # Backup / restore
    _s("backup-overview", "Backup and Restore Overview", _BACKUP,
       "virt-backup-restore-overview.adoc", "backup", "restore", "oadp"),
    _s("backup-snapshots", "Backup and Restore with Snapshots", _BACKUP,
       "virt-backup-restore-snapshots.adoc", "backup", "snapshots", "restore"),
    _s("disaster-recovery", "Disaster Recovery", _BACKUP, "virt-disaster-recovery.adoc",
       "disaster-recovery", "dr", "failover"),
    # Support
    _s("support-overview", "Support Overview", _SUPPORT, "virt-support-overview.adoc",
       "support", "overview", "web-console"),
    _s("troubleshooting", "Troubleshooting", _SUPPORT, "virt-troubleshooting.adoc",
       "support", "troubleshooting", "debug"),
    _s("collecting-data", "Collecting Virtualization Data", _SUPPORT,
       "virt-collecting-virt-data.adoc", "support", "must-gather", "logs", "data-collection"),
    # Release notes
    _s("release-notes-4-22", "Release Notes 4.22", _RELEASE, "virt-4-22-release-notes.adoc",
       "release-notes", "4.22", "new-features", "changes"),
    _s("release-notes-4-21", "Release Notes 4.21", _RELEASE, "virt-4-21-release-notes.adoc",
       "release-notes", "4.21", "new-features", "changes"),
    # Updating
    _s("upgrading", "Upgrading OpenShift Virtualization", _UPDATING, "upgrading-virt.adoc",
       "upgrade", "update", "version"),
)


def find_section(section_id: str) -> DocSection | None:
    """Return the section with the given id, or None."""
    return next((section for section in SECTIONS if section.id == section_id), None)


def search_sections(text: str) -> list[DocSection]:
    """Return sections whose title, id or tags contain every whitespace-separated term."""
    terms = [term.lower() for term in text.split()]

    def haystack(section: DocSection) -> str:
        return f"{section.title} {section.id} {' '.join(section.tags)}".lower()

    return [s for s in SECTIONS if all(term in haystack(s) for term in terms)]