# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pytest

from keyhelpers import get_key

TARGET_SIZES = [1024, 2048, pytest.param(4096, marks=pytest.mark.slow)]


@pytest.fixture(scope="module", params=TARGET_SIZES)
def keyset(request):
    return get_key(request.param)


@pytest.fixture(scope="module")
def small_key():
    return get_key(1024)
