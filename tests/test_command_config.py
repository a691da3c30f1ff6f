import pytest

from nyabot.command_config import CommandExecConfig, event_context, event_user
from nyabot.infoev import MsgEvent


def test_event_user_and_context_group():
    ev = MsgEvent(self_id=1, user_id=2, group_id=3)
    assert event_user(ev) == 2
    assert event_context(ev) == 3


def test_event_context_private_falls_back_to_user():
    assert event_context(MsgEvent(self_id=1, user_id=2)) == 2


def test_in_context():
    cfg = CommandExecConfig(allow_exec_context={3})
    assert cfg.in_context(MsgEvent(self_id=1, user_id=2, group_id=3)) is True
    assert cfg.in_context(MsgEvent(self_id=1, user_id=2, group_id=4)) is False


def test_in_super_user_listed():
    cfg = CommandExecConfig(allow_super_user={2})
    assert cfg.in_super_user(MsgEvent(self_id=1, user_id=2)) is True
    assert cfg.in_super_user(MsgEvent(self_id=1, user_id=5)) is False


@pytest.mark.parametrize("flag", ["is_admin_super_user", "is_all_user_admin"])
def test_in_super_user_flags_admit_everyone(flag):
    cfg = CommandExecConfig(**{flag: True})
    assert cfg.in_super_user(MsgEvent(self_id=1, user_id=5)) is True


def test_round_trip():
    cfg = CommandExecConfig({3, 1}, {2}, True, False)
    assert CommandExecConfig.from_dict(cfg.to_dict()) == cfg


def test_missing_field():
    with pytest.raises(ValueError):
        CommandExecConfig.from_dict({"allow_exec_context": []})


def test_wrong_type():
    data = CommandExecConfig().to_dict()
    data["allow_super_user"] = ["x"]
    with pytest.raises(ValueError):
        CommandExecConfig.from_dict(data)