from dataclasses import asdict

import pytest

from nyabot.infoev import (
    ApiError,
    BotApi,
    MemberInfo,
    MsgEvent,
    Segment,
    self_bot_info,
)


def member_dict(**overrides):
    data = {
        "group_id": 10,
        "user_id": 20,
        "nickname": "cat",
        "card": "",
        "sex": "unknown",
        "age": 0,
        "area": "",
        "join_time": 1,
        "last_sent_time": 2,
        "level": "1",
        "role": "member",
        "unfriendly": False,
        "title": "",
        "title_expire_time": 0,
        "card_changeable": True,
    }
    data.update(overrides)
    return data


def make_api(response):
    calls = []

    async def call(action, params):
        calls.append((action, params))
        return response

    return BotApi(call), calls


def test_segments_filters_by_kind():
    ev = MsgEvent(
        self_id=1,
        user_id=2,
        message=[
            Segment("text", {"text": "a"}),
            Segment("at", {"qq": "5"}),
            Segment("text", {"text": "b"}),
        ],
    )
    assert [s.data["text"] for s in ev.segments("text")] == ["a", "b"]
    assert ev.segments("reply") == []


def test_text_joined_from_segments():
    ev = MsgEvent(self_id=1, user_id=2, message=[Segment("text", {"text": "hi "}), Segment("text", {"text": "there"})])
    assert ev.text == "hi there"
    assert MsgEvent(self_id=1, user_id=2).text is None


def test_is_group():
    assert MsgEvent(self_id=1, user_id=2, group_id=3).is_group() is True
    assert MsgEvent(self_id=1, user_id=2).is_group() is False


def test_reply_records_quote_flag_and_calls_transport():
    sent = []
    ev = MsgEvent(self_id=1, user_id=2, transport=lambda m, q: sent.append((m, q)))
    ev.reply("x")
    ev.reply_and_quote("y")
    assert ev.outbox == [("x", False), ("y", True)]
    assert sent == ev.outbox


def test_member_info_round_trip():
    data = member_dict()
    assert asdict(MemberInfo.from_dict(data)) == data


def test_member_info_missing_field():
    data = member_dict()
    del data["nickname"]
    with pytest.raises(ValueError):
        MemberInfo.from_dict(data)


@pytest.mark.asyncio
async def test_get_group_member_info_sends_action():
    api, calls = make_api({"status": "ok", "retcode": 0, "data": member_dict()})
    data = await api.get_group_member_info(10, 20, False)
    assert data["nickname"] == "cat"
    assert calls == [("get_group_member_info", {"group_id": 10, "user_id": 20, "no_cache": False})]


@pytest.mark.asyncio
async def test_set_msg_emoji_like_sends_action():
    api, calls = make_api({"status": "ok", "retcode": 0, "data": None})
    await api.set_msg_emoji_like(99, "76")
    assert calls == [("set_msg_emoji_like", {"message_id": 99, "emoji_id": "76"})]


@pytest.mark.asyncio
async def test_failed_call_raises():
    api, _ = make_api({"status": "failed", "retcode": 100, "data": "nope"})
    with pytest.raises(ApiError):
        await api.get_group_member_info(1, 2, False)


@pytest.mark.asyncio
async def test_self_bot_info_needs_group():
    api, _ = make_api({"status": "ok", "retcode": 0, "data": member_dict()})
    with pytest.raises(ValueError):
        await self_bot_info(api, MsgEvent(self_id=1, user_id=2))


@pytest.mark.asyncio
async def test_self_bot_info_asks_for_self():
    api, calls = make_api({"status": "ok", "retcode": 0, "data": member_dict(nickname="nya")})
    info = await self_bot_info(api, MsgEvent(self_id=7, user_id=2, group_id=10))
    assert info.nickname == "nya"
    assert calls[0][1]["user_id"] == 7
    assert calls[0][1]["group_id"] == 10