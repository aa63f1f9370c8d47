import asyncio

import pytest

from core.errors import FrameworkError
from core.registry import Registry

NAME = "modules.account.update_login"


def test_manifest_loads():
    reg = Registry()
    mani = reg.get_manifest(NAME)
    assert mani["name"] == NAME
    assert reg.get_action_spec(NAME, "UPDATE_LOGIN")["modes"] == ["SINGLE"]


def test_runs_handler(settings, client):
    out = asyncio.run(Registry().run(NAME, {"action": "UPDATE_LOGIN", "input": {"profileId": "p1", "accountId": "a1"}},
                                     env={"settings": settings, "client": client}))
    assert out == {"ok": True, "mode": "SINGLE", "data": {"ok": True, "account": None, "profile": None}}


def test_rejects_unsupported_mode(settings):
    with pytest.raises(FrameworkError) as ei:
        asyncio.run(Registry().run(NAME, {"action": "UPDATE_LOGIN", "mode": "BULK"}, env={"settings": settings}))
    assert ei.value.code == "ERR_UNSUPPORTED_MODE"


def test_unknown_module():
    with pytest.raises(FrameworkError):
        Registry().get_manifest("modules.missing.thing")
    with pytest.raises(FrameworkError):
        Registry().get_manifest("elsewhere")
