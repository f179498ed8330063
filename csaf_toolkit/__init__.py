#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#

import logging
from os import getenv

from django.conf import settings

VERSION = "0.1.0"
__version__ = VERSION

logger = logging.getLogger("csaf_toolkit")

TRUE_VALUES = ("1", "true", "yes", "on")


def get_settings(var_name, default=None):
    """
    Return the settings value from the environment or Django settings.
    Django settings are only looked up when they are configured, as the
    toolkit is usable outside of a Django project.
    """
    value = getenv(var_name)
    if value:
        return value

    if settings.configured:
        return getattr(settings, var_name, default)

    return default


def get_bool_settings(var_name, default=False):
    """Return the settings value for `var_name` as a boolean."""
    value = get_settings(var_name, default)
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return bool(value)
