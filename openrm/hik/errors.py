"""Camera SDK status codes and the exception raised for failing ones."""

from __future__ import annotations

from enum import IntEnum


class MvError(IntEnum):
    """Status codes returned by the camera SDK."""

    OK = 0x00000000

    E_HANDLE = 0x80000000
    E_SUPPORT = 0x80000001
    E_BUFOVER = 0x80000002
    E_CALLORDER = 0x80000003
    E_PARAMETER = 0x80000004
    E_RESOURCE = 0x80000006
    E_NODATA = 0x80000007
    E_PRECONDITION = 0x80000008
    E_VERSION = 0x80000009
    E_NOENOUGH_BUF = 0x8000000A
    E_ABNORMAL_IMAGE = 0x8000000B
    E_LOAD_LIBRARY = 0x8000000C
    E_NOOUTBUF = 0x8000000D
    E_UNKNOW = 0x800000FF

    E_GC_GENERIC = 0x80000100
    E_GC_ARGUMENT = 0x80000101
    E_GC_RANGE = 0x80000102
    E_GC_PROPERTY = 0x80000103
    E_GC_RUNTIME = 0x80000104
    E_GC_LOGICAL = 0x80000105
    E_GC_ACCESS = 0x80000106
    E_GC_TIMEOUT = 0x80000107
    E_GC_DYNAMICCAST = 0x80000108
    E_GC_UNKNOW = 0x800001FF

    E_NOT_IMPLEMENTED = 0x80000200
    E_INVALID_ADDRESS = 0x80000201
    E_WRITE_PROTECT = 0x80000202
    E_ACCESS_DENIED = 0x80000203
    E_BUSY = 0x80000204
    E_PACKET = 0x80000205
    E_NETER = 0x80000206
    E_IP_CONFLICT = 0x80000221

    E_USB_READ = 0x80000300
    E_USB_WRITE = 0x80000301
    E_USB_DEVICE = 0x80000302
    E_USB_GENICAM = 0x80000303
    E_USB_BANDWIDTH = 0x80000304
    E_USB_DRIVER = 0x80000305
    E_USB_UNKNOW = 0x800003FF

    E_UPG_FILE_MISMATCH = 0x80000400
    E_UPG_LANGUSGE_MISMATCH = 0x80000401
    E_UPG_CONFLICT = 0x80000402
    E_UPG_INNER_ERR = 0x80000403
    E_UPG_UNKNOW = 0x800004FF


_DESCRIPTIONS = {
    MvError.OK: "Successed, no error",
    MvError.E_HANDLE: "Error or invalid handle",
    MvError.E_SUPPORT: "Not supported function",
    MvError.E_BUFOVER: "Buffer overflow",
    MvError.E_CALLORDER: "Function calling order error",
    MvError.E_PARAMETER: "Incorrect parameter",
    MvError.E_RESOURCE: "Applying resource failed",
    MvError.E_NODATA: "No data",
    MvError.E_PRECONDITION: "Precondition error, or running environment changed",
    MvError.E_VERSION: "Version mismatches",
    MvError.E_NOENOUGH_BUF: "Insufficient memory",
    MvError.E_ABNORMAL_IMAGE: "Abnormal image, maybe incomplete image because of lost packet",
    MvError.E_LOAD_LIBRARY: "Load library failed",
    MvError.E_NOOUTBUF: "No Avaliable Buffer",
    MvError.E_UNKNOW: "Unknown error",
    MvError.E_GC_GENERIC: "General error",
    MvError.E_GC_ARGUMENT: "Illegal parameters",
    MvError.E_GC_RANGE: "The value is out of range",
    MvError.E_GC_PROPERTY: "Property",
    MvError.E_GC_RUNTIME: "Running environment error",
    MvError.E_GC_LOGICAL: "Logical error",
    MvError.E_GC_ACCESS: "Node accessing condition error",
    MvError.E_GC_TIMEOUT: "Timeout",
    MvError.E_GC_DYNAMICCAST: "Transformation exception",
    MvError.E_GC_UNKNOW: "GenICam unknown error",
    MvError.E_NOT_IMPLEMENTED: "The command is not supported by device",
    MvError.E_INVALID_ADDRESS: "The target address being accessed does not exist",
    MvError.E_WRITE_PROTECT: "The target address is not writable",
    MvError.E_ACCESS_DENIED: "No permission",
    MvError.E_BUSY: "Device is busy, or network disconnected",
    MvError.E_PACKET: "Network data packet error",
    MvError.E_NETER: "Network error",
    MvError.E_IP_CONFLICT: "Device IP conflict",
    MvError.E_USB_READ: "Reading USB error",
    MvError.E_USB_WRITE: "Writing USB error",
    MvError.E_USB_DEVICE: "Device exception",
    MvError.E_USB_GENICAM: "GenICam error",
    MvError.E_USB_BANDWIDTH: "Insufficient bandwidth, this error code is newly added",
    MvError.E_USB_DRIVER: "Driver mismatch or unmounted drive",
    MvError.E_USB_UNKNOW: "USB unknown error",
    MvError.E_UPG_FILE_MISMATCH: "Firmware mismatches",
    MvError.E_UPG_LANGUSGE_MISMATCH: "Firmware language mismatches",
    MvError.E_UPG_CONFLICT: "Upgrading conflicted (repeated upgrading requests during device upgrade)",
    MvError.E_UPG_INNER_ERR: "Camera internal error during upgrade",
    MvError.E_UPG_UNKNOW: "Unknown error during upgrade",
}


def _normalize(code: int) -> int | MvError:
    """Map a signed or unsigned 32-bit code onto MvError when it is known."""
    value = int(code) & 0xFFFFFFFF
    try:
        return MvError(value)
    except ValueError:
        return value


class CameraError(Exception):
    """A camera SDK call returned a failing status code."""

    def __init__(self, code: int):
        self.code = _normalize(code)
        if isinstance(self.code, MvError):
            message = f"{error_name(self.code)} (0x{int(self.code):08X}): {_DESCRIPTIONS[self.code]}"
        else:
            message = f"unknown camera error 0x{self.code:08X}"
        super().__init__(message)


def error_name(code: int) -> str:
    """Symbolic name of a status code, or its hex form when it is unknown."""
    known = _normalize(code)
    if isinstance(known, MvError):
        return "MV_" + known.name
    return f"0x{known:08X}"


def check(code: int) -> MvError:
    """Return MvError.OK for a success code, raise CameraError otherwise."""
    known = _normalize(code)
    if known != MvError.OK:
        raise CameraError(code)
    return MvError.OK