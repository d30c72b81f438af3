"""
Minimal Working Example: class loader context of an app with <uses-library> tags.

Usage:
    uv run python examples/uses_libraries/run.py

This demonstrates the core dexclc workflow:
- Declare library paths, merging the tables of transitive dependencies
- Add libraries to the unconditional and SDK-gated tiers
- Fix up the tiers and print the compiler flags
"""

import dexclc

# Library paths known for the app. Paths of dependencies of dependencies are
# merged in, keeping their declaration order.
libs = dexclc.LibraryPathTable()
libs.insert("com.example.maps", "out/maps.jar", "/system/framework/maps.jar")

vendor_libs = dexclc.LibraryPathTable()
vendor_libs.insert("com.example.vendor", "out/vendor.jar", "/vendor/framework/vendor.jar")
libs.merge(vendor_libs)

# A library that may be missing from the build: its paths are only checked if
# a tier actually asks for it.
libs.insert_if_named("com.example.optional", None, None)

# Compatibility libraries default to /system/framework/<name>.jar.
libs.insert(dexclc.ANDROID_HIDL_MANAGER, "out/hidl.manager.jar", None)
libs.insert(dexclc.ANDROID_HIDL_BASE, "out/hidl.base.jar", None)
libs.insert(dexclc.ANDROID_TEST_MOCK, "out/test.mock.jar", None)

clc = dexclc.ClassLoaderContextMap()
clc.add_libraries(dexclc.UNCONDITIONAL, libs, ["com.example.maps", "com.example.vendor"])
clc.add_libraries(29, libs, [dexclc.ANDROID_HIDL_MANAGER, dexclc.ANDROID_HIDL_BASE])
# Dropped by fixup: android.test.runner is not used.
clc.add_libraries(30, libs, [dexclc.ANDROID_TEST_MOCK])

dexclc.fix_conditional_class_loader_context(clc)

flags, paths = dexclc.compute_class_loader_context(clc)
print(f"--class-loader-context flags:{flags}")
print(f"build dependencies: {paths}")
print(f"<uses-library> tags: {clc.uses_libs()}")

from dexclc.display import display_class_loader_context

display_class_loader_context(clc, title="example app")
