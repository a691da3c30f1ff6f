# nyabot

An asyncio library for a group chat bot that answers as a cat girl. It has
three parts, and they share one command registry.

## Commands

These live in `nyabot.commands` and `nyabot.command_config`.

- `BotCommand.parse(text, event, bot)` splits a text on whitespace into a
  command word and its arguments. An empty text raises `ValueError`.
- `CommandRegistry.handle_message(event, bot)` looks at every text segment
  of a message. Each segment that starts with `$` is parsed and passed to
  `CommandRegistry.invoke`.
- `invoke` checks permissions, then starts every handler registered for the
  command as an asyncio task, and returns the tasks.
  - When the event's context is not allowed, it replies with a refusal. The
    context is the group id, or the sender's id for private messages, and it
    must be in `CommandExecConfig.allow_exec_context`.
  - When the command is a super command and the sender is not a super user,
    it replies with a refusal.
  - When the command is not registered, it replies that the command is
    unknown.
- Register handlers with `on_common_command(cmd, handler)` or
  `on_super_command(cmd, handler)`. A handler is an async callable that takes
  a `BotCommand`.
- `CommandExecConfig.in_super_user(event)` is true in any of these cases:
  - `is_all_user_admin` is set.
  - The sender is in `allow_super_user`.
  - `is_admin_super_user` is set. This flag alone makes every sender a super
    user; no group role is checked.

## Chat

This part is `nyabot.chat`, with `nyabot.chat_config`, `nyabot.ml`,
`nyabot.memory` and `nyabot.reply`.

`ChatPlugin(config, client)` answers in the groups listed in
`ChatConfig.allow_groups`. It looks at a group message in this order:

1. If the message @-mentions the bot, or contains the bot's group nickname,
   its text is sent to the model as a question. The nickname is looked up
   with `self_bot_info`. Texts that start with `$` are ignored, and an empty
   text gets a short "what is it?" reply.
2. Otherwise, if the text contains `猫娘`, the bot replies that someone
   seems to be calling it.

More details:

- `NyaCatMemory` keeps the conversation of each group, and sends it to the
  model behind the `role_prompt` system message. When a question is added,
  the oldest entries are dropped until both of these hold:
  - the window holds fewer than `role_max_message` earlier entries;
  - the oldest entry is younger than `role_context_expiration_time_second`.
- `ChatClient` posts to `<endpoint>/chat/completions` of an OpenAI-compatible
  server with `httpx`. It raises `ModelError` on transport errors, error
  statuses, invalid JSON or empty answers.
- `reply_as_im` splits an answer at `dot_wait_tag` and drops empty parts. An
  empty tag splits the answer into single characters. It sends each part
  after a pause, in a task that it returns. The pause is one of these:
  - `dot_wait_pre_char_ms` times the part's UTF-8 length, if that option is
    set;
  - `dot_wait_time_ms` otherwise.
- `ChatPlugin.register(registry)` adds these commands. All of them act only
  in allowed chat groups.
  - `$hi` greets.
  - `$smart <question>` asks the smart model with `smart_prompt`.
  - `$kill` is a super command. It makes the bot stop answering.
  - `$restart` is a super command. It makes the bot answer again.
  - `$mem_kill` is a super command. It clears the chat memory.

## Emoji reactions

This part is `nyabot.emoji_attack` and `nyabot.emoji_config`.

`EmojiAttackPlugin(config, data)` reacts with the emoji ids in
`EmojiAttackConfig.emoji`. It reacts to every message of a marked user in
the groups listed in `allow_monkey_groups`. Between two reactions it waits
`wait_ms` milliseconds, which defaults to 300.

The super command `$monkey` works only in groups:

- `add` marks the first of the given users that is not yet marked.
- `del` unmarks the first of the given users that is marked.
- `clean` unmarks everyone in the group.
- `atk` reacts to the replied-to message with emoji `1` to `21`, except
  `17`.
- `once` reacts to the replied-to message with the configured emoji.

For `add` and `del`, the users are the @-mentioned ones other than the bot,
followed by any integer ids given after the sub-command. The bot answers
whether the operation succeeded.

## Configuration files

`init_config(data_dir, name, cls)` reads a JSON file from a data directory.
`init_data` does the same and wraps the value in a `PersistentData`.

A missing file is written with the class's defaults. Malformed files raise
`nyabot.configinit.ConfigError`.

| File (suggested name) | Class |
| --- | --- |
| `command_exec_config.json` | `nyabot.command_config.CommandExecConfig` |
| `chat_config.json` | `nyabot.chat_config.ChatConfig` |
| `emoji_attack_config.json` | `nyabot.emoji_config.EmojiAttackConfig` |
| `emoji_attack_data.json` | `nyabot.emoji_config.EmojiAttackData` |

`PersistentData.save()` writes the value back. Leaving a
`with PersistentData ...` block also writes it back.

A `chat_config.json` looks like this:

```json
{
  "allow_groups": [123456],
  "model": {
    "key": "placeholder",
    "endpoint": "https://llm.example.com/v1",
    "max_tokens": 512,
    "role_model": "role-model",
    "role_prompt": "You are a cat girl.",
    "role_context_expiration_time_second": 600,
    "role_max_message": 20,
    "dot_wait_tag": "。",
    "dot_wait_time_ms": 1000,
    "dot_wait_pre_char_ms": null,
    "smart_model": "smart-model",
    "smart_prompt": "Answer briefly."
  }
}
```

## Putting it together

```python
from pathlib import Path

from nyabot.chat import ChatPlugin
from nyabot.chat_config import ChatConfig
from nyabot.command_config import CommandExecConfig
from nyabot.commands import CommandRegistry
from nyabot.configinit import init_config, init_data
from nyabot.emoji_attack import EmojiAttackPlugin
from nyabot.emoji_config import EmojiAttackConfig, EmojiAttackData
from nyabot.ml import ChatClient

data_dir = Path("data")

registry = CommandRegistry(
    init_config(data_dir, "command_exec_config.json", CommandExecConfig)
)

chat_config = init_config(data_dir, "chat_config.json", ChatConfig)
chat = ChatPlugin(chat_config, ChatClient(chat_config.model))
chat.register(registry)

emoji = EmojiAttackPlugin(
    init_config(data_dir, "emoji_attack_config.json", EmojiAttackConfig),
    init_data(data_dir, "emoji_attack_data.json", EmojiAttackData),
)
emoji.register(registry)
```

Then, for each incoming message:

1. Build a `nyabot.infoev.MsgEvent`. It takes the ids, the list of
   `Segment`s, and an optional `transport(message, quote)` callable. Replies
   go to that callable and are also recorded in `event.outbox`.
2. Make a `nyabot.infoev.BotApi` from an async `call(action, params)`
   function. The function returns a response dict with `status`, `retcode`
   and `data`. A failed response raises `ApiError`.
3. Await these three handlers:
   - `registry.handle_message(event, bot)`
   - `chat.on_msg(bot, event)`
   - `emoji.handle_group_msg(event, bot)`

## What it does not do

This is a library only. It has no command-line program. It has no
connection to a chat platform: the transport for replies and the `call`
function for bot actions must be supplied by the caller. It also does not
save the chat memory between runs.

## Tests

```
pip install -e .[test]
pytest
```