"""
Configuration file for desksetup
=================================================================================
PURPOSE: Centralized defaults for the installers, the NFS setup and the
         workstation provisioning menu.

USAGE: Read by desksetup.common.config_loader.ConfigLoader. A YAML file
       (~/.config/desksetup/config.yaml or $DESKSETUP_CONFIG) and environment
       variables can override these defaults.

ORGANIZATION:
1. Directory layout
2. Desktop behaviour
3. Application sources
4. MIME type tables
5. NFS shares
6. Workstation provisioning
"""

# ==============================================================================
# 1. DIRECTORY LAYOUT
# ==============================================================================
# All paths are relative to the home directory of the user being set up.

LOCAL_BIN_DIR = ".local/bin"
APPLICATIONS_DIR = ".local/share/applications"
ICONS_DIR = ".local/share/icons"
MIME_DIR = ".local/share/mime"
EXTENSIONS_DIR = ".local/share/gnome-shell/extensions"
CACHE_DIR = ".cache"

# STATE_FILE: JSON record of what desksetup installed and which version
STATE_FILE = ".local/state/desksetup/state.json"

# LOG_FILE: Log file written next to the console output
LOG_FILE = ".cache/desksetup/desksetup.log"

# USER_CONFIG_FILE: Optional YAML overrides
USER_CONFIG_FILE = ".config/desksetup/config.yaml"

# ==============================================================================
# 2. DESKTOP BEHAVIOUR
# ==============================================================================

DEBUG_MODE = False

# PIN_TO_DOCK: Add installed applications to org.gnome.shell favorite-apps
PIN_TO_DOCK = True

# RESTART_FILE_MANAGER: Run "nautilus -q" and relaunch it after installing
RESTART_FILE_MANAGER = True

# REPLACE_SYSTEM_ICONS: Allow Bambu Studio to overwrite the Yaru STL icons
REPLACE_SYSTEM_ICONS = True

# HTTP_TIMEOUT: Seconds before an API request or download stalls out
HTTP_TIMEOUT = 60

# ==============================================================================
# 3. APPLICATION SOURCES
# ==============================================================================

CURSOR = {
    "api_url": "https://www.cursor.com/api/download",
    "platform": "linux-x64",
    "release_track": "stable",
    "icon_url": "https://us1.discourse-cdn.com/flex020/uploads/cursor1/original/2X/a/a4f78589d63edd61a2843306f8e11bad9590f0ca.png",
    "install_subdir": "cursor",
    "appimage_name": "cursor.AppImage",
    "icon_name": "cursor.png",
    "desktop_id": "cursor.desktop",
    "startup_wm_class": "Cursor",
}

BAMBU_STUDIO = {
    "github_repo": "bambulab/BambuStudio",
    "asset_keyword": "ubuntu",
    "asset_extensions": [".zip", ".AppImage"],
    "svg_icon_url": "https://raw.githubusercontent.com/bambulab/BambuStudio/master/resources/images/BambuStudio.svg",
    "png_icon_url": "https://github.com/bambulab/BambuStudio/raw/master/resources/images/BambuStudio_128.png",
    "install_subdir": "bambu-studio",
    "appimage_name": "bambu-studio.AppImage",
    "icon_basename": "bambu-studio",
    "desktop_id": "bambu-studio.desktop",
    "startup_wm_class": "BambuStudio",
    "system_packages": ["libwebkit2gtk-4.1-0"],
    # (link, target) pairs for Ubuntu 24.04 WebKit compatibility
    "webkit_symlinks": [
        ("/usr/lib/x86_64-linux-gnu/libwebkit2gtk-4.0.so.37",
         "/usr/lib/x86_64-linux-gnu/libwebkit2gtk-4.1.so.0"),
        ("/usr/lib/x86_64-linux-gnu/libjavascriptcoregtk-4.0.so.18",
         "/usr/lib/x86_64-linux-gnu/libjavascriptcoregtk-4.1.so.0"),
    ],
    "system_icon_theme": "/usr/share/icons/Yaru",
    "system_icon_sizes": [16, 24, 32, 48, 256],
    "mime_icon_sizes": [48, 128, 256],
}

CURA = {
    "version": "5.9.0",
    "appimage_url": "https://github.com/Ultimaker/Cura/releases/download/{version}/UltiMaker-Cura-{version}-linux-X64.AppImage",
    "icon_url": "https://raw.githubusercontent.com/Ultimaker/Cura/master/resources/images/cura-icon.png",
    "app_name": "Ultimaker-Cura",
    "icon_subdir": "hicolor/256x256/apps",
}

RUBYMINE = {
    "product_code": "RM",
    "api_url": "https://data.services.jetbrains.com/products/releases",
    "install_subdir": "rubymine",
    "extracted_dir_pattern": "RubyMine-*",
    "desktop_id": "rubymine.desktop",
    "startup_wm_class": "jetbrains-rubymine",
    "launcher_name": "rubymine",
    "icon_candidates": [
        "bin/rubymine.png",
        "bin/rubymine.svg",
        "lib/rubymine.png",
        "lib/rubymine.svg",
        "plugins/ruby/lib/ruby.png",
    ],
}

DOCK_FROM_DASH = {
    "uuid": "dock-from-dash@fthx.github.com",
    "extension_id": "4703",
    "api_base": "https://extensions.gnome.org",
    "system_packages": ["gnome-shell-extensions"],
    "required_commands": ["gnome-extensions"],
}

# ==============================================================================
# 4. MIME TYPE TABLES
# ==============================================================================

STL_GLOBS = ["*.stl", "*.STL"]

# mime type -> comment
BAMBU_STL_TYPES = {
    "model/stl": "STL 3D Model",
    "application/sla": "SLA 3D Model",
    "application/vnd.ms-pki.stl": "STL 3D Model (Microsoft)",
    "model/x.stl-ascii": "STL 3D Model (ASCII)",
    "model/x.stl-binary": "STL 3D Model (Binary)",
}

CURA_STL_TYPES = {
    "application/sla": "STL file",
    "application/vnd.ms-pki.stl": "STL file",
}

RUBY_MIME_TYPES = ["text/x-ruby", "application/x-ruby", "text/x-script.ruby"]

CURSOR_MIME_TYPES = ["text/plain", "inode/directory", "application/x-code-workspace"]

# ==============================================================================
# 5. NFS SHARES
# ==============================================================================

NFS = {
    "fstab_path": "/etc/fstab",
    "exports_path": "/etc/exports",
    "server_host": "192.168.15.53",
    "server_name": "fabionas",
    "mount_options": "defaults,_netdev",
    # remote export path -> local mount point, description
    "client_mounts": [
        {"remote": "/srv/nfs/sdc1", "local": "/mnt/nfs/sdc1", "description": "NTFS partition"},
        {"remote": "/srv/nfs/sdc2", "local": "/mnt/nfs/sdc2", "description": "Linux partition"},
        {"remote": "/mnt/wd1tb", "local": "/mnt/nfs/wd1tb", "description": "1TB drive"},
        {"remote": "/home", "local": "/mnt/nfs/home", "description": "Home directories"},
        {"remote": "/var/nfs/general", "local": "/mnt/nfs/general", "description": "General storage"},
    ],
    "server_disks": [
        {"device": "/dev/sdc1", "mount_point": "/mnt/sdc1", "fs_type": "ntfs",
         "options": "defaults,uid=1000,gid=1000,umask=0022", "passno": 0,
         "export_dir": "/srv/nfs/sdc1"},
        {"device": "/dev/sdc2", "mount_point": "/mnt/sdc2", "fs_type": "ext4",
         "options": "defaults", "passno": 2,
         "export_dir": "/srv/nfs/sdc2"},
    ],
    "export_network": "192.168.15.0/24",
    "export_options": "rw,sync,no_subtree_check",
}

# ==============================================================================
# 6. WORKSTATION PROVISIONING
# ==============================================================================

WORKSTATION = {
    "projects_dir": "software-projects",
    "base_packages": ["curl", "git", "build-essential"],
    "ruby_build_packages": ["build-essential", "rustc", "libssl-dev", "libyaml-dev",
                            "zlib1g-dev", "libgmp-dev"],
    "mise_install_url": "https://mise.run",
    "ruby_version": "ruby@3",
    "node_version": "node@lts",
    "postgres_password": "postgres",
    "docker_gpg_url": "https://download.docker.com/linux/ubuntu/gpg",
    "docker_repo_url": "https://download.docker.com/linux/ubuntu",
    "docker_packages": ["docker-ce", "docker-ce-cli", "containerd.io", "docker-compose-plugin"],
    "brave_keyring_url": "https://brave-browser-apt-release.s3.brave.com/brave-browser-archive-keyring.gpg",
    "brave_repo": "https://brave-browser-apt-release.s3.brave.com/ stable main",
    "chrome_deb_url": "https://dl.google.com/linux/direct/google-chrome-stable_current_amd64.deb",
    "lastpass_url": "https://download.cloud.lastpass.com/linux/lplinux.tar.bz2",
    "snaps": [("flameshot", False)],
    "ide_snaps": [("code", True), ("rubymine", True)],
}
