"""Status codes of the camera image-signal-processing library."""

from __future__ import annotations

import warnings
from enum import IntEnum


class IspError(IntEnum):
    """Status codes returned by the image-processing algorithm library."""

    OK = 0x00000000
    ERR = 0x10000000

    E_ABILITY_ARG = 0x10000001

    E_MEM_NULL = 0x10000002
    E_MEM_ALIGN = 0x10000003
    E_MEM_LACK = 0x10000004
    E_MEM_SIZE_ALIGN = 0x10000005
    E_MEM_ADDR_ALIGN = 0x10000006

    E_IMG_FORMAT = 0x10000007
    E_IMG_SIZE = 0x10000008
    E_IMG_STEP = 0x10000009
    E_IMG_DATA_NULL = 0x1000000A

    E_CFG_TYPE = 0x1000000B
    E_CFG_SIZE = 0x1000000C
    E_PRC_TYPE = 0x1000000D
    E_PRC_SIZE = 0x1000000E
    E_FUNC_TYPE = 0x1000000F
    E_FUNC_SIZE = 0x10000010

    E_PARAM_INDEX = 0x10000011
    E_PARAM_VALUE = 0x10000012
    E_PARAM_NUM = 0x10000013

    E_NULL_PTR = 0x10000014
    E_OVER_MAX_MEM = 0x10000015
    E_CALL_BACK = 0x10000016

    E_ENCRYPT = 0x10000017
    E_EXPIRE = 0x10000018

    E_BAD_ARG = 0x10000019
    E_DATA_SIZE = 0x1000001A
    E_STEP = 0x1000001B

    E_CPUID = 0x1000001C

    WARNING = 0x1000001D

    E_TIME_OUT = 0x1000001E
    E_LIB_VERSION = 0x1000001F
    E_MODEL_VERSION = 0x10000020
    E_GPU_MEM_ALLOC = 0x10000021
    E_FILE_NON_EXIST = 0x10000022
    E_NONE_STRING = 0x10000023
    E_IMAGE_CODEC = 0x10000024
    E_FILE_OPEN = 0x10000025
    E_FILE_READ = 0x10000026
    E_FILE_WRITE = 0x10000027
    E_FILE_READ_SIZE = 0x10000028
    E_FILE_TYPE = 0x10000029
    E_MODEL_TYPE = 0x1000002A
    E_MALLOC_MEM = 0x1000002B
    E_BIND_CORE_FAILED = 0x1000002C

    E_DENOISE_NE_IMG_FORMAT = 0x10402001
    E_DENOISE_NE_FEATURE_TYPE = 0x10402002
    E_DENOISE_NE_PROFILE_NUM = 0x10402003
    E_DENOISE_NE_GAIN_NUM = 0x10402004
    E_DENOISE_NE_GAIN_VAL = 0x10402005
    E_DENOISE_NE_BIN_NUM = 0x10402006
    E_DENOISE_NE_INIT_GAIN = 0x10402007
    E_DENOISE_NE_NOT_INIT = 0x10402008
    E_DENOISE_COLOR_MODE = 0x10402009
    E_DENOISE_ROI_NUM = 0x1040200A
    E_DENOISE_ROI_ORI_PT = 0x1040200B
    E_DENOISE_ROI_SIZE = 0x1040200C
    E_DENOISE_GAIN_NOT_EXIST = 0x1040200D
    E_DENOISE_GAIN_BEYOND_RANGE = 0x1040200E
    E_DENOISE_NP_BUF_SIZE = 0x1040200F


_DESCRIPTIONS = {
    IspError.OK: "Processed correctly",
    IspError.ERR: "Unspecified error",
    IspError.E_ABILITY_ARG: "Invalid parameter in the capability set",
    IspError.E_MEM_NULL: "Memory address is null",
    IspError.E_MEM_ALIGN: "Memory alignment requirement not met",
    IspError.E_MEM_LACK: "Insufficient memory size",
    IspError.E_MEM_SIZE_ALIGN: "Memory size does not meet the alignment requirement",
    IspError.E_MEM_ADDR_ALIGN: "Memory address does not meet the alignment requirement",
    IspError.E_IMG_FORMAT: "Image format incorrect or not supported",
    IspError.E_IMG_SIZE: "Image width or height incorrect or out of range",
    IspError.E_IMG_STEP: "Image width or height does not match the step",
    IspError.E_IMG_DATA_NULL: "Image data address is null",
    IspError.E_CFG_TYPE: "Incorrect parameter type to set or get",
    IspError.E_CFG_SIZE: "Incorrect input or output structure size to set or get",
    IspError.E_PRC_TYPE: "Incorrect processing type",
    IspError.E_PRC_SIZE: "Incorrect input or output parameter size for processing",
    IspError.E_FUNC_TYPE: "Incorrect sub-processing type",
    IspError.E_FUNC_SIZE: "Incorrect input or output parameter size for sub-processing",
    IspError.E_PARAM_INDEX: "Incorrect index parameter",
    IspError.E_PARAM_VALUE: "Value parameter incorrect or out of range",
    IspError.E_PARAM_NUM: "Incorrect param_num parameter",
    IspError.E_NULL_PTR: "Null pointer passed as a function argument",
    IspError.E_OVER_MAX_MEM: "Exceeded the maximum memory limit",
    IspError.E_CALL_BACK: "Callback function error",
    IspError.E_ENCRYPT: "Encryption error",
    IspError.E_EXPIRE: "Algorithm library usage period error",
    IspError.E_BAD_ARG: "Parameter out of range",
    IspError.E_DATA_SIZE: "Incorrect data size",
    IspError.E_STEP: "Incorrect data step",
    IspError.E_CPUID: "CPU does not support the instruction set of the optimised code",
    IspError.WARNING: "Warning",
    IspError.E_TIME_OUT: "Algorithm library timed out",
    IspError.E_LIB_VERSION: "Algorithm version error",
    IspError.E_MODEL_VERSION: "Model version error",
    IspError.E_GPU_MEM_ALLOC: "GPU memory allocation error",
    IspError.E_FILE_NON_EXIST: "File does not exist",
    IspError.E_NONE_STRING: "String is empty",
    IspError.E_IMAGE_CODEC: "Image codec error",
    IspError.E_FILE_OPEN: "File open error",
    IspError.E_FILE_READ: "File read error",
    IspError.E_FILE_WRITE: "File write error",
    IspError.E_FILE_READ_SIZE: "File read size error",
    IspError.E_FILE_TYPE: "File type error",
    IspError.E_MODEL_TYPE: "Model type error",
    IspError.E_MALLOC_MEM: "Memory allocation error",
    IspError.E_BIND_CORE_FAILED: "Failed to bind the thread to a core",
    IspError.E_DENOISE_NE_IMG_FORMAT: "Noise profile image format error",
    IspError.E_DENOISE_NE_FEATURE_TYPE: "Noise profile type error",
    IspError.E_DENOISE_NE_PROFILE_NUM: "Noise profile count error",
    IspError.E_DENOISE_NE_GAIN_NUM: "Noise profile gain count error",
    IspError.E_DENOISE_NE_GAIN_VAL: "Noise curve gain value error",
    IspError.E_DENOISE_NE_BIN_NUM: "Noise curve bin count error",
    IspError.E_DENOISE_NE_INIT_GAIN: "Noise estimation initial gain error",
    IspError.E_DENOISE_NE_NOT_INIT: "Noise estimation not initialised",
    IspError.E_DENOISE_COLOR_MODE: "Colour space mode error",
    IspError.E_DENOISE_ROI_NUM: "Image ROI count error",
    IspError.E_DENOISE_ROI_ORI_PT: "Image ROI origin error",
    IspError.E_DENOISE_ROI_SIZE: "Image ROI size error",
    IspError.E_DENOISE_GAIN_NOT_EXIST: "Camera gain does not exist (gain count at its limit)",
    IspError.E_DENOISE_GAIN_BEYOND_RANGE: "Camera gain out of range",
    IspError.E_DENOISE_NP_BUF_SIZE: "Noise profile buffer size error",
}


def _normalize(code: int) -> int | IspError:
    value = int(code) & 0xFFFFFFFF
    try:
        return IspError(value)
    except ValueError:
        return value


def describe(code: int) -> str:
    """Human-readable description of a status code."""
    known = _normalize(code)
    if isinstance(known, IspError):
        return _DESCRIPTIONS[known]
    return "Unknown algorithm library error"


class IspAlgorithmError(Exception):
    """An image-processing library call returned a failing status code."""

    def __init__(self, code: int):
        self.code = _normalize(code)
        super().__init__(f"{isp_error_name(code)} (0x{int(self.code):08X}): {describe(code)}")


def isp_error_name(code: int) -> str:
    """Symbolic name of a status code, or its hex form when it is unknown."""
    known = _normalize(code)
    if isinstance(known, IspError):
        return "MV_ALG_" + known.name
    return f"0x{known:08X}"


def check_isp(code: int) -> IspError:
    """Return the status for success or warning codes, raise for failing ones.

    A warning code is reported through the warnings module.
    """
    known = _normalize(code)
    if known == IspError.OK:
        return IspError.OK
    if known == IspError.WARNING:
        warnings.warn(f"{isp_error_name(known)}: {describe(known)}", RuntimeWarning, stacklevel=2)
        return IspError.WARNING
    raise IspAlgorithmError(code)