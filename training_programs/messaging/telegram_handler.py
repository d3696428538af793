import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, List, Optional, Set

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    ConversationHandler,
    MessageHandler,
    filters,
)

from training_programs.programs.models import PROGRAMS, ProgramKind
from training_programs.programs.service import (
    InvalidWeekCountError,
    ProgramError,
    ProgramService,
    parse_positive_integer,
)


logger = logging.getLogger(__name__)


class ConversationState(Enum):
    CHOOSING_PROGRAM = auto()
    AWAITING_WEEK_COUNT = auto()


class ProgramAction(Enum):
    BUILD = "build"
    EXTEND = "extend"


@dataclass
class PendingRequest:
    action: ProgramAction
    kind: Optional[ProgramKind] = None


class TelegramHandler:
    """Telegram menu for building and extending program tables"""

    def __init__(
        self,
        token: str,
        program_service: ProgramService,
        allowed_user_ids: Optional[Set[int]] = None,
    ) -> None:
        """Initialize the Telegram handler

        Args:
            token: Telegram bot token
            program_service: ProgramService instance
            allowed_user_ids: Telegram users allowed to use the bot, everyone if empty

        """
        self.token = token
        self.program_service = program_service
        self.allowed_user_ids = allowed_user_ids or set()
        self.pending: Dict[int, PendingRequest] = {}
        self.application = Application.builder().token(token).build()

    def _is_user_allowed(self, update: Update) -> bool:
        """Check if the user is allowed to use the bot"""
        if not self.allowed_user_ids:
            return True
        return update.effective_user.id in self.allowed_user_ids

    async def start(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle the /start command"""
        if not self._is_user_allowed(update):
            await update.message.reply_text("❌ You are not allowed to use this bot.")
            return

        await update.message.reply_text(
            "👋 Welcome to your training program tracker!\n\n"
            "Commands:\n"
            "/build - Create a walking or running program\n"
            "/extend - Add weeks to a program\n"
            "/status - Show how many weeks each program has\n"
            "/help - Show how the programs work"
        )

    async def help(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle the /help command"""
        if not self._is_user_allowed(update):
            await update.message.reply_text("❌ You are not allowed to use this bot.")
            return

        await update.message.reply_text(
            "📝 How the programs work:\n\n"
            "1. /build creates a sheet with the number of weeks you choose\n"
            "2. Fill in the Actual row of each week in the spreadsheet\n"
            "3. The Estimated row sets each day's target to 120% of the last three weeks\n"
            "4. /extend adds more weeks when you run out"
        )

    async def status(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> None:
        """Handle the /status command"""
        if not self._is_user_allowed(update):
            await update.message.reply_text("❌ You are not allowed to use this bot.")
            return

        lines = []
        for kind in PROGRAMS:
            snapshot = self.program_service.status(kind)
            if snapshot.empty:
                lines.append(f"{snapshot.table_name}: not built yet")
            elif not snapshot.initialized:
                lines.append(f"{snapshot.table_name}: incomplete ({snapshot.row_count} rows), check the sheet")
            else:
                lines.append(f"{snapshot.table_name}: {snapshot.week_count} weeks")
        await update.message.reply_text("📊 Programs:\n" + "\n".join(lines))

    def _available_programs(self, action: ProgramAction) -> List[ProgramKind]:
        """Programs the action can apply to: empty ones for build, built ones for extend"""
        if action is ProgramAction.BUILD:
            return [kind for kind in PROGRAMS if self.program_service.status(kind).empty]
        return [kind for kind in PROGRAMS if self.program_service.is_initialized(kind)]

    async def _start_action(self, update: Update, action: ProgramAction) -> ConversationState | int:
        if not self._is_user_allowed(update):
            await update.message.reply_text("❌ You are not allowed to use this bot.")
            return ConversationHandler.END

        kinds = self._available_programs(action)
        if not kinds:
            if action is ProgramAction.BUILD:
                await update.message.reply_text("All programs are already built. Use /extend to add weeks.")
            else:
                await update.message.reply_text("No program has been built yet. Use /build first.")
            return ConversationHandler.END

        self.pending[update.effective_user.id] = PendingRequest(action=action)
        keyboard = [
            [
                InlineKeyboardButton(PROGRAMS[kind].table_name, callback_data=f"{action.value}:{kind.value}")
                for kind in kinds
            ]
        ]
        verb = "build" if action is ProgramAction.BUILD else "extend"
        await update.message.reply_text(
            f"Which program do you want to {verb}?\n\n(Use /cancel at any time to stop)",
            reply_markup=InlineKeyboardMarkup(keyboard),
        )
        return ConversationState.CHOOSING_PROGRAM

    async def start_build(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> ConversationState | int:
        """Handle the /build command"""
        return await self._start_action(update, ProgramAction.BUILD)

    async def start_extend(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> ConversationState | int:
        """Handle the /extend command"""
        return await self._start_action(update, ProgramAction.EXTEND)

    async def handle_program_choice(
        self, update: Update, _context: ContextTypes.DEFAULT_TYPE
    ) -> ConversationState | int:
        """Handle the program picked from the inline keyboard"""
        query = update.callback_query
        await query.answer()
        telegram_user_id = query.from_user.id

        request = self.pending.get(telegram_user_id)
        if request is None:
            await query.edit_message_text("This menu has expired. Use /build or /extend again.")
            return ConversationHandler.END

        _, kind_name = query.data.split(":", 1)
        request.kind = ProgramKind.from_name(kind_name)
        table_name = PROGRAMS[request.kind].table_name

        if request.action is ProgramAction.BUILD:
            prompt = f"How many weeks should the {table_name} start with?"
        else:
            prompt = f"How many weeks should be added to the {table_name}?"
        await query.edit_message_text(f"{prompt}\n\nPlease enter a positive whole number.")
        return ConversationState.AWAITING_WEEK_COUNT

    async def handle_week_count(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> int:
        """Handle the number of weeks typed by the user"""
        telegram_user_id = update.effective_user.id
        request = self.pending.pop(telegram_user_id, None)
        if request is None or request.kind is None:
            await update.message.reply_text("Please start again with /build or /extend.")
            return ConversationHandler.END

        table_name = PROGRAMS[request.kind].table_name
        try:
            week_count = parse_positive_integer(update.message.text)
        except InvalidWeekCountError:
            await update.message.reply_text(
                f"❌ Please enter a number greater than zero. Nothing was changed.\n\n"
                f"Use /{request.action.value} to try again."
            )
            return ConversationHandler.END

        try:
            if request.action is ProgramAction.BUILD:
                total_weeks = self.program_service.build_program(request.kind, week_count)
            else:
                total_weeks = self.program_service.extend_program(request.kind, week_count)
        except ProgramError as e:
            await update.message.reply_text(f"❌ {e}")
            return ConversationHandler.END
        except Exception:
            logger.exception(f"Error updating {table_name}")
            await update.message.reply_text("❌ Sorry, I couldn't update the spreadsheet. Please try again.")
            return ConversationHandler.END

        await update.message.reply_text(f"✅ {table_name} now has {total_weeks} weeks.")
        return ConversationHandler.END

    async def cancel(self, update: Update, _context: ContextTypes.DEFAULT_TYPE) -> int:
        """Cancel the current build or extend request"""
        self.pending.pop(update.effective_user.id, None)
        await update.message.reply_text("🚫 Cancelled. Nothing was changed.")
        return ConversationHandler.END

    def get_conversation_handler(self) -> ConversationHandler:
        return ConversationHandler(
            entry_points=[
                CommandHandler("build", self.start_build),
                CommandHandler("extend", self.start_extend),
            ],
            states={
                ConversationState.CHOOSING_PROGRAM: [
                    CallbackQueryHandler(self.handle_program_choice, pattern="^(build|extend):[a-z]+$")
                ],
                ConversationState.AWAITING_WEEK_COUNT: [
                    MessageHandler(filters.TEXT & ~filters.COMMAND, self.handle_week_count)
                ],
            },
            fallbacks=[CommandHandler("cancel", self.cancel)],
        )

    def start_polling(self) -> None:
        """Start the bot polling for messages"""
        self.application.add_handler(self.get_conversation_handler())
        self.application.add_handler(CommandHandler("start", self.start))
        self.application.add_handler(CommandHandler("help", self.help))
        self.application.add_handler(CommandHandler("status", self.status))

        logger.info("Handlers registered, starting polling...")
        self.application.run_polling()
