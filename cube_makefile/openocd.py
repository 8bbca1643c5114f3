"""OpenOCD configuration file (openocd.cfg) used by the flash and erase targets."""

from __future__ import annotations

import re

import structlog

from cube_makefile.definitions import OPENOCD_CONFIG_NAME
from cube_makefile.workspace.base import Workspace

log = structlog.get_logger("cube_makefile.openocd")

DEFAULT_INTERFACE = "stlink"

# Interface scripts shipped with openocd (interface/<name>.cfg)
OPENOCD_INTERFACES = [
    "altera-usb-blaster",
    "altera-usb-blaster2",
    "buspirate",
    "cmsis-dap",
    "dummy",
    "estick",
    "flashlink",
    "ft232r",
    "imx-native",
    "jlink",
    "kitprog",
    "nds32-aice",
    "opendous",
    "openjtag",
    "osbdm",
    "parport",
    "parport_dlc5",
    "raspberrypi-native",
    "raspberrypi2-native",
    "rlink",
    "stlink",
    "stlink-dap",
    "stlink-v1",
    "stlink-v2",
    "stlink-v2-1",
    "sysfsgpio-raspberrypi",
    "ti-icdi",
    "ulink",
    "usb-jtag",
    "usbprog",
    "vsllink",
    "xds110",
]

_INTERFACE_RE = re.compile(r"(source\s*\[find\s+interface/)[\w-]+\.cfg")


def create_openocd_config(interface: str, target: str) -> str:
    """Render openocd.cfg for a programmer interface and a target MCU family."""
    return f"""\
#OpenOCD configuration file, generated by cube-makefile

# Programmer, can be changed to several interfaces
# Standard will be the stlink interface as this is the standard for STM32 dev boards
source [find interface/{interface}.cfg]

# The target MCU. This should match your board
source [find target/{target}.cfg]
"""


def change_programmer(config: str, programmer: str) -> str:
    """Replace the interface script in an existing configuration, keep the rest."""
    return _INTERFACE_RE.sub(lambda m: f"{m.group(1)}{programmer}.cfg", config)


def read_or_create_openocd_config(
    workspace: Workspace,
    target: str,
    interface: str = DEFAULT_INTERFACE,
) -> str:
    """Return the existing openocd.cfg, writing a fresh one when it is missing."""
    try:
        return workspace.read_text(OPENOCD_CONFIG_NAME)
    except FileNotFoundError:
        log.info("creating openocd config", interface=interface, target=target)
    config = create_openocd_config(interface, target)
    workspace.write_text(OPENOCD_CONFIG_NAME, config)
    return config


def set_programmer(workspace: Workspace, programmer: str) -> str:
    """Rewrite the programmer in the workspace openocd.cfg.

    Raises FileNotFoundError when the configuration does not exist yet.
    """
    if programmer not in OPENOCD_INTERFACES:
        log.warning("unknown openocd interface", programmer=programmer)
    config = change_programmer(workspace.read_text(OPENOCD_CONFIG_NAME), programmer)
    workspace.write_text(OPENOCD_CONFIG_NAME, config)
    return config
