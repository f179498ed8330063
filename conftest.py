#
# Copyright (c) nexB Inc. and others. All rights reserved.
# SPDX-License-Identifier: AGPL-3.0-only
# See https://aboutcode.org for more information about AboutCode FOSS projects.
#

import django
from django.conf import settings


def pytest_configure(config):
    # The toolkit reads its settings from a Django project when one is configured.
    if not settings.configured:
        settings.configure(
            CSAF_STRICT_ENUMS=False,
            USE_TZ=True,
        )
        django.setup()
