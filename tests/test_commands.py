import asyncio

import pytest

from nyabot.command_config import CommandExecConfig
from nyabot.commands import (
    NOT_SUPER_USER,
    UNKNOWN_COMMAND,
    UNKNOWN_CONTEXT,
    BotCommand,
    CommandRegistry,
)
from nyabot.infoev import MsgEvent, Segment


def event(user=2, group=3, texts=()):
    return MsgEvent(
        self_id=1,
        user_id=user,
        group_id=group,
        message=[Segment("text", {"text": t}) for t in texts],
    )


def recorder(store, tag):
    async def handler(cmd):
        store.append((tag, cmd.cmd, cmd.args))

    return handler


def test_parse_splits_whitespace():
    cmd = BotCommand.parse("$shell  new   x", event(), None)
    assert cmd.cmd == "$shell"
    assert cmd.args == ("new", "x")


def test_parse_empty_raises():
    with pytest.raises(ValueError):
        BotCommand.parse("   ", event(), None)


@pytest.mark.asyncio
async def test_invoke_outside_context():
    reg = CommandRegistry(CommandExecConfig(allow_exec_context={99}))
    reg.on_common_command("$hi", recorder([], "a"))
    ev = event()
    assert await reg.invoke(BotCommand.parse("$hi", ev, None)) == []
    assert ev.outbox == [(UNKNOWN_CONTEXT, True)]


@pytest.mark.asyncio
async def test_super_command_rejects_unknown_user():
    seen = []
    reg = CommandRegistry(CommandExecConfig(allow_exec_context={3}, allow_super_user={7}))
    reg.on_super_command("$kill", recorder(seen, "k"))
    ev = event(user=2)
    await reg.invoke(BotCommand.parse("$kill", ev, None))
    assert ev.outbox == [(NOT_SUPER_USER, True)]
    assert seen == []


@pytest.mark.asyncio
async def test_super_command_runs_for_super_user():
    seen = []
    reg = CommandRegistry(CommandExecConfig(allow_exec_context={3}, allow_super_user={2}))
    reg.on_super_command("$kill", recorder(seen, "k"))
    tasks = await reg.invoke(BotCommand.parse("$kill now", event(), None))
    await asyncio.gather(*tasks)
    assert seen == [("k", "$kill", ("now",))]


@pytest.mark.asyncio
async def test_unknown_command_reply():
    reg = CommandRegistry(CommandExecConfig(allow_exec_context={3}))
    ev = event()
    await reg.invoke(BotCommand.parse("$nope", ev, None))
    assert ev.outbox == [(UNKNOWN_COMMAND, True)]


@pytest.mark.asyncio
async def test_all_handlers_for_command_run_and_only_those():
    seen = []
    reg = CommandRegistry(CommandExecConfig(allow_exec_context={3}))
    reg.on_common_command("$hi", recorder(seen, "a"))
    reg.on_common_command("$hi", recorder(seen, "b"))
    reg.on_common_command("$smart", recorder(seen, "c"))
    await asyncio.gather(*await reg.invoke(BotCommand.parse("$hi", event(), None)))
    assert sorted(tag for tag, _, _ in seen) == ["a", "b"]


@pytest.mark.asyncio
async def test_handle_message_only_dollar_texts():
    seen = []
    reg = CommandRegistry(CommandExecConfig(allow_exec_context={3}))
    reg.on_common_command("$hi", recorder(seen, "a"))
    ev = event(texts=["hello", "$hi there", "x $hi"])
    tasks = await reg.handle_message(ev, "bot")
    await asyncio.gather(*tasks)
    assert seen == [("a", "$hi", ("there",))]
    assert ev.outbox == []


@pytest.mark.asyncio
async def test_private_message_context_is_user():
    seen = []
    reg = CommandRegistry(CommandExecConfig(allow_exec_context={2}))
    reg.on_common_command("$hi", recorder(seen, "a"))
    tasks = await reg.handle_message(event(user=2, group=None, texts=["$hi"]), None)
    await asyncio.gather(*tasks)
    assert len(seen) == 1