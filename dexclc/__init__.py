"""
dexclc: Class loader context for <uses-library> dependencies.

A class loader context (CLC) tells the ahead-of-time compiler which shared
libraries an app's class loader will see on the device, per SDK tier: an
unconditional tier plus tiers of compatibility libraries that the platform
only loads for apps targeting older SDK versions.

Example:
    import dexclc

    table = dexclc.LibraryPathTable()
    table.insert("a", "out/a.jar", "/system/a.jar")
    table.insert(dexclc.ANDROID_HIDL_BASE, "out/hidl.base.jar", None)  # default path

    clc = dexclc.ClassLoaderContextMap()
    clc.add_libraries(dexclc.UNCONDITIONAL, table, ["a"])
    clc.add_libraries(29, table, [dexclc.ANDROID_HIDL_BASE])
    dexclc.fix_conditional_class_loader_context(clc)

    flags, paths = dexclc.compute_class_loader_context(clc)
    # " --host-context-for-sdk 29 PCL[out/hidl.base.jar] --target-context-for-sdk 29 ..."
    clc.uses_libs()  # ['a']
"""

__version__ = "0.1.0"

# Compatibility libraries
from dexclc.compat import (
    ANDROID_HIDL_BASE,
    ANDROID_HIDL_MANAGER,
    ANDROID_TEST_BASE,
    ANDROID_TEST_MOCK,
    ANDROID_TEST_RUNNER,
    COMPAT_LIBRARIES,
    ORG_APACHE_HTTP_LEGACY,
    default_install_path,
)

# Config
from dexclc.config import GlobalConfig, ModuleConfig, ProjectConfig

# Context
from dexclc.context import ClassLoaderContextMap, fix_conditional_class_loader_context

# Errors
from dexclc.errors import (
    ClassLoaderContextError,
    UnknownBuildPathError,
    UnknownInstallPathError,
    UnresolvedLibraryPathError,
)

# Generation
from dexclc.generate import generate_class_loader_context

# Library paths
from dexclc.paths import LibraryPathTable
from dexclc.policy import PathResolutionPolicy

# Serialization
from dexclc.serialize import (
    UNKNOWN_CLASS_LOADER_CONTEXT,
    class_loader_context_flag,
    compute_class_loader_context,
    dumps_json,
    from_json_dict,
    loads_json,
    to_json_dict,
)

# Types
from dexclc.types import UNCONDITIONAL, InsertMode, LibraryEntry, Tier

__all__ = [
    # Version
    "__version__",
    # Types
    "InsertMode",
    "LibraryEntry",
    "Tier",
    "UNCONDITIONAL",
    # Errors
    "ClassLoaderContextError",
    "UnknownBuildPathError",
    "UnknownInstallPathError",
    "UnresolvedLibraryPathError",
    # Compatibility libraries
    "ANDROID_HIDL_BASE",
    "ANDROID_HIDL_MANAGER",
    "ANDROID_TEST_BASE",
    "ANDROID_TEST_MOCK",
    "ANDROID_TEST_RUNNER",
    "ORG_APACHE_HTTP_LEGACY",
    "COMPAT_LIBRARIES",
    "default_install_path",
    # Library paths
    "LibraryPathTable",
    "PathResolutionPolicy",
    # Context
    "ClassLoaderContextMap",
    "fix_conditional_class_loader_context",
    # Serialization
    "UNKNOWN_CLASS_LOADER_CONTEXT",
    "compute_class_loader_context",
    "class_loader_context_flag",
    "to_json_dict",
    "from_json_dict",
    "dumps_json",
    "loads_json",
    # Config
    "GlobalConfig",
    "ModuleConfig",
    "ProjectConfig",
    # Generation
    "generate_class_loader_context",
]
