import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.ext import ConversationHandler

from training_programs.messaging.telegram_handler import (
    ConversationState,
    PendingRequest,
    ProgramAction,
    TelegramHandler,
)
from training_programs.programs.models import ProgramKind

USER_ID = 1001


def make_update(text=None, user_id=USER_ID):
    update = MagicMock()
    update.effective_user.id = user_id
    update.message.text = text
    update.message.reply_text = AsyncMock()
    return update


def make_callback(data, user_id=USER_ID):
    update = MagicMock()
    update.callback_query.data = data
    update.callback_query.from_user.id = user_id
    update.callback_query.answer = AsyncMock()
    update.callback_query.edit_message_text = AsyncMock()
    return update


def last_reply(update):
    return update.message.reply_text.call_args.args[0]


@pytest.fixture
def handler(service):
    return TelegramHandler(token="123456:TEST-TOKEN", program_service=service, allowed_user_ids={USER_ID})


def test_build_conversation_creates_program(handler, service):
    update = make_update()
    assert asyncio.run(handler.start_build(update, None)) is ConversationState.CHOOSING_PROGRAM
    keyboard = update.message.reply_text.call_args.kwargs["reply_markup"].inline_keyboard
    assert [button.callback_data for button in keyboard[0]] == ["build:walking", "build:running"]

    choice = make_callback("build:running")
    assert asyncio.run(handler.handle_program_choice(choice, None)) is ConversationState.AWAITING_WEEK_COUNT
    choice.callback_query.answer.assert_awaited_once()

    reply = make_update("4")
    assert asyncio.run(handler.handle_week_count(reply, None)) == ConversationHandler.END
    assert "4 weeks" in last_reply(reply)
    assert service.week_count(ProgramKind.RUNNING) == 4
    assert handler.pending == {}


def test_build_menu_only_offers_empty_programs(handler, service):
    service.build_program(ProgramKind.WALKING, 1)

    update = make_update()
    asyncio.run(handler.start_build(update, None))

    keyboard = update.message.reply_text.call_args.kwargs["reply_markup"].inline_keyboard
    assert [button.callback_data for button in keyboard[0]] == ["build:running"]


def test_extend_without_programs_ends_conversation(handler):
    update = make_update()

    assert asyncio.run(handler.start_extend(update, None)) == ConversationHandler.END
    assert "/build" in last_reply(update)


def test_invalid_week_count_changes_nothing(handler, service, store):
    handler.pending[USER_ID] = PendingRequest(action=ProgramAction.BUILD, kind=ProgramKind.WALKING)

    update = make_update("zero")
    assert asyncio.run(handler.handle_week_count(update, None)) == ConversationHandler.END
    assert "Nothing was changed" in last_reply(update)
    assert store.writes == []


def test_extend_conversation_adds_weeks(handler, service):
    service.build_program(ProgramKind.WALKING, 2)
    handler.pending[USER_ID] = PendingRequest(action=ProgramAction.EXTEND, kind=ProgramKind.WALKING)

    update = make_update("3")
    asyncio.run(handler.handle_week_count(update, None))

    assert service.week_count(ProgramKind.WALKING) == 5
    assert "5 weeks" in last_reply(update)


def test_cancel_clears_pending_request(handler, store):
    handler.pending[USER_ID] = PendingRequest(action=ProgramAction.BUILD)

    update = make_update("/cancel")
    assert asyncio.run(handler.cancel(update, None)) == ConversationHandler.END
    assert handler.pending == {}
    assert store.writes == []


def test_storage_failure_is_reported(handler, store):
    store.fail_writes_after = 0
    handler.pending[USER_ID] = PendingRequest(action=ProgramAction.BUILD, kind=ProgramKind.WALKING)

    update = make_update("2")
    asyncio.run(handler.handle_week_count(update, None))

    assert "couldn't update" in last_reply(update)


def test_unknown_user_is_turned_away(handler):
    update = make_update(user_id=999)

    assert asyncio.run(handler.start_build(update, None)) == ConversationHandler.END
    assert "not allowed" in last_reply(update)


def test_status_lists_programs(handler, service):
    service.build_program(ProgramKind.RUNNING, 6)

    update = make_update("/status")
    asyncio.run(handler.status(update, None))

    assert "Walking Program: not built yet" in last_reply(update)
    assert "Running Program: 6 weeks" in last_reply(update)


def test_expired_menu_ends_conversation(handler, store):
    choice = make_callback("build:walking")

    assert asyncio.run(handler.handle_program_choice(choice, None)) == ConversationHandler.END
    assert "expired" in choice.callback_query.edit_message_text.call_args.args[0]
    assert handler.pending == {}
    assert store.writes == []


def test_status_reports_incomplete_table(handler, service, store):
    table = store.get_or_create_table("Walking Program")
    store.write_range(table, 1, 2, 1, 1, [["Week"]])

    update = make_update("/status")
    asyncio.run(handler.status(update, None))

    assert "Walking Program: incomplete (1 rows)" in last_reply(update)
    assert "-2 weeks" not in last_reply(update)


def test_build_menu_skips_incomplete_table(handler, store):
    table = store.get_or_create_table("Walking Program")
    store.write_range(table, 1, 2, 1, 1, [["Week"]])

    update = make_update()
    asyncio.run(handler.start_build(update, None))

    keyboard = update.message.reply_text.call_args.kwargs["reply_markup"].inline_keyboard
    assert [button.callback_data for button in keyboard[0]] == ["build:running"]
