"""
Generation of a module's class loader context from its configuration.

Builds the unconditional tier from the module's declared libraries (or, for a
system server jar, from the jars preceding it on the system server
classpath), adds the conditional tiers of compatibility libraries that the
platform implicitly loads for apps targeting older SDKs, and applies the
fixup pass.
"""

from __future__ import annotations

import logging

from dexclc.compat import COMPAT_USES_LIBS_BY_SDK
from dexclc.config import GlobalConfig, ModuleConfig
from dexclc.context import ClassLoaderContextMap, fix_conditional_class_loader_context
from dexclc.types import UNCONDITIONAL

logger = logging.getLogger(__name__)


def generate_class_loader_context(
    module: ModuleConfig,
    global_config: GlobalConfig | None = None,
) -> ClassLoaderContextMap | None:
    """
    Compute the class loader context of *module*.

    Args:
        module: The module's library declarations and paths.
        global_config: Build-wide settings. Defaults to :class:`GlobalConfig()`.

    Returns:
        The fixed-up map, or None if the context is unknown because some
        library has no entry in the module's path table.

    Raises:
        UnresolvedLibraryPathError: A requested library has unknown paths.
    """
    global_config = global_config or GlobalConfig()
    clc_map = ClassLoaderContextMap()
    system_server_jars = list(global_config.system_server_jars)

    if module.name in system_server_jars:
        index = system_server_jars.index(module.name)
        clc_map.add_system_server_libraries(
            UNCONDITIONAL,
            system_server_jars[:index],
            global_config.system_server_dexjar_dir,
        )
    elif module.enforce_uses_libraries:
        uses_libs = module.uses_libraries + module.optional_uses_libraries
        requests = [(UNCONDITIONAL, uses_libs)]
        requests.extend(COMPAT_USES_LIBS_BY_SDK.items())

        for tier, names in requests:
            if not clc_map.add_libraries(tier, module.library_paths, names):
                logger.warning(
                    "Class loader context of %r is unknown: missing libraries in tier %s",
                    module.name,
                    tier,
                )
                return None

    fix_conditional_class_loader_context(clc_map)
    return clc_map
