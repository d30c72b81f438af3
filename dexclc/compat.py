"""
Compatibility libraries.

Legacy shared libraries that the platform adds to an app's class loader on
its own when the app targets an old enough SDK. They get two special rules:

- an unknown install path defaults to ``/system/framework/<name>.jar``
- some of them are only activated when a companion library is also in use
"""

from __future__ import annotations

import posixpath
from types import MappingProxyType

ANDROID_HIDL_BASE = "android.hidl.base-V1.0-java"
ANDROID_HIDL_MANAGER = "android.hidl.manager-V1.0-java"
ANDROID_TEST_BASE = "android.test.base"
ANDROID_TEST_MOCK = "android.test.mock"
ANDROID_TEST_RUNNER = "android.test.runner"
ORG_APACHE_HTTP_LEGACY = "org.apache.http.legacy"

# Libraries implicitly added for apps targeting SDK < 28, < 29 and < 30.
COMPAT_USES_LIBS_28 = (ORG_APACHE_HTTP_LEGACY,)
COMPAT_USES_LIBS_29 = (ANDROID_HIDL_MANAGER, ANDROID_HIDL_BASE)
OPTIONAL_COMPAT_USES_LIBS_30 = (ANDROID_TEST_BASE, ANDROID_TEST_MOCK)

COMPAT_USES_LIBS_BY_SDK = MappingProxyType(
    {
        28: COMPAT_USES_LIBS_28,
        29: COMPAT_USES_LIBS_29,
        30: OPTIONAL_COMPAT_USES_LIBS_30,
    }
)

COMPAT_LIBRARIES = frozenset(
    COMPAT_USES_LIBS_28 + COMPAT_USES_LIBS_29 + OPTIONAL_COMPAT_USES_LIBS_30
)

# library -> library that must be present for it to stay in the context
COMPANION_LIBRARIES = MappingProxyType({ANDROID_TEST_MOCK: ANDROID_TEST_RUNNER})

SYSTEM_FRAMEWORK_DIR = "/system/framework"


def is_compat_library(name: str) -> bool:
    return name in COMPAT_LIBRARIES


def default_install_path(name: str) -> str:
    """On-device path a compatibility library is assumed to be installed at."""
    return posixpath.join(SYSTEM_FRAMEWORK_DIR, name + ".jar")


def required_companion(name: str) -> str | None:
    return COMPANION_LIBRARIES.get(name)
