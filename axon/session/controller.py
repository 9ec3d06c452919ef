"""
Session Controller.

Top-level state machine for one play session:

    IDLE -> COUNTDOWN -> PLAYING -> {CONTINUE_PENDING, RESULT} -> IDLE

- PLAYING rotates the active mini-game through the enabled pool after
  every resolved question.
- Classic ends on the external clock (on_time_expired).
- Endless never ends directly on a mistake: the pre-death tallies are
  frozen into a PendingDeath record and the player is offered a continue
  (rewarded ad or XP). Granting restores the record; declining or letting
  the countdown run out ends the run with the frozen tallies.

Events arriving in the wrong phase raise InvalidTransitionError. Repeating
a terminal event in RESULT (on_game_end, on_time_expired, on_end_run or a
decline) returns the cached summary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from loguru import logger

from axon.adaptive.engine import AdaptiveConfig, AdaptiveEngine, AdaptivePhase, AdaptiveState
from axon.adaptive.tiers import TierResolver, tier_label
from axon.core.errors import InsufficientXPError, InvalidTransitionError
from axon.core.modes import GameConfig, GameMode, MiniGameType
from axon.economy.gate import AdEconomyGate
from axon.persistence.repository import ProgressRepository
from axon.scoring.ledger import GameSessionState, ScoringLedger, accuracy_percent
from axon.session.collaborators import (
    AdProvider,
    HapticEngine,
    HapticKind,
    NullAdProvider,
    NullHapticEngine,
    NullSoundPlayer,
    SoundCue,
    SoundPlayer,
)
from axon.session.selector import GameSelector

ContinueMethod = Literal["ad", "xp", "decline"]

DEFAULT_CONTINUE_COUNTDOWN_SECONDS = 10


class SessionPhase(str, Enum):
    IDLE = "idle"
    COUNTDOWN = "countdown"
    PLAYING = "playing"
    CONTINUE_PENDING = "continue_pending"
    RESULT = "result"


@dataclass(frozen=True)
class PendingDeath:
    """Tallies frozen at the moment an endless run was lost."""

    score: int
    streak: int
    best_streak: int
    tier: int
    mini_game: MiniGameType


@dataclass(frozen=True)
class AnswerFeedback:
    """What the UI needs after one answer."""

    correct: bool
    points: int
    score: int
    streak: int
    tier: int
    tier_label: str
    tier_changed: bool
    phase: AdaptivePhase
    difficulty: int
    speed_multiplier: float
    allowed_time_ms: int
    next_game: MiniGameType
    game_params: dict[str, Any]
    session_phase: SessionPhase


@dataclass(frozen=True)
class ContinueOffer:
    streak: int
    score: int
    xp_cost: int
    xp_balance: int
    can_afford_xp: bool
    countdown_seconds: int


@dataclass(frozen=True)
class ContinueResolution:
    granted: bool
    method: str
    session_phase: SessionPhase
    xp_balance: int
    next_game: MiniGameType | None = None
    summary: SessionSummary | None = None


@dataclass(frozen=True)
class SessionSummary:
    """Final tallies of a finished session."""

    mode: GameMode
    score: int
    correct: int
    wrong: int
    streak: int
    best_streak: int
    accuracy: float
    xp_gained: int
    is_new_high_score: bool
    peak_game_speed: float
    final_tier: int
    duration_sec: int
    gate_navigation: bool
    game_breakdown: dict[str, dict[str, int]] = field(default_factory=dict)
    daily_challenge_completed: bool = False
    daily_bonus_xp: int = 0


class SessionController:
    """
    Drives one session at a time against the adaptive engine, tier
    resolver, scoring ledger and ad economy.

    Example:
        controller = SessionController(GameConfig(mode="endless"), repo)
        controller.start()
        controller.begin_play()
        feedback = controller.on_answer(correct=True, response_time_ms=900)
    """

    def __init__(
        self,
        config: GameConfig,
        repository: ProgressRepository | None = None,
        *,
        engine: AdaptiveEngine | None = None,
        tiers: TierResolver | None = None,
        ledger: ScoringLedger | None = None,
        gate: AdEconomyGate | None = None,
        selector: GameSelector | None = None,
        sound: SoundPlayer | None = None,
        haptics: HapticEngine | None = None,
        ad_provider: AdProvider | None = None,
        continue_countdown_seconds: int = DEFAULT_CONTINUE_COUNTDOWN_SECONDS,
    ):
        self.config = config
        self.repository = repository or ProgressRepository()
        self.engine = engine or AdaptiveEngine()
        self.tiers = tiers or TierResolver()
        self.ledger = ledger or ScoringLedger(self.repository)
        self.gate = gate or AdEconomyGate(self.repository)
        self.selector = selector or GameSelector(config.enabled_games)
        self.sound = sound or NullSoundPlayer()
        self.haptics = haptics or NullHapticEngine()
        self.ad_provider = ad_provider or NullAdProvider()
        self.continue_countdown_seconds = continue_countdown_seconds

        self._phase = SessionPhase.IDLE
        self._session: GameSessionState | None = None
        self._pending: PendingDeath | None = None
        self._summary: SessionSummary | None = None
        self._tier = 1

    @classmethod
    def from_settings(
        cls,
        config: GameConfig,
        repository: ProgressRepository,
        settings=None,
        **collaborators: Any,
    ) -> SessionController:
        """Wire every component from application settings."""
        if settings is None:
            from config import get_settings

            settings = get_settings()
        return cls(
            config,
            repository,
            engine=AdaptiveEngine(AdaptiveConfig.from_settings(settings)),
            tiers=TierResolver.from_settings(settings),
            gate=AdEconomyGate.from_settings(repository, settings),
            selector=collaborators.pop("selector", None)
            or GameSelector(config.enabled_games, settings.game_selection_policy),
            continue_countdown_seconds=settings.ad_continue_countdown_seconds,
            **collaborators,
        )

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def phase(self) -> SessionPhase:
        return self._phase

    @property
    def session(self) -> GameSessionState | None:
        return self._session

    @property
    def pending_death(self) -> PendingDeath | None:
        return self._pending

    @property
    def tier(self) -> int:
        return self._tier

    @property
    def adaptive_state(self) -> AdaptiveState:
        return self.engine.state

    @property
    def current_game(self) -> MiniGameType | None:
        return self._session.current_mini_game if self._session else None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self, start_tier: int = 1) -> GameSessionState:
        """
        Begin a new session (IDLE/RESULT -> COUNTDOWN).

        Args:
            start_tier: Tier a classic run starts in; endless always starts at 1
        """
        self._require("start", SessionPhase.IDLE, SessionPhase.RESULT)

        mode = self.config.mode
        start_streak = 0
        if mode == GameMode.CLASSIC:
            start_streak = self.tiers.start_streak(start_tier)
        elif start_tier != 1:
            logger.debug(f"Ignoring start tier {start_tier} for endless run")

        first_game = self.selector.first()
        self.engine.reset()
        self.engine.set_current_game(first_game)
        self._session = self.ledger.new_session(mode, first_game, start_streak)
        self._tier = self.tiers.resolve(start_streak, mode)
        self._pending = None
        self._summary = None
        self._transition(SessionPhase.COUNTDOWN)
        return self._session

    def begin_play(self) -> MiniGameType:
        """Countdown finished (COUNTDOWN -> PLAYING). Returns the first game."""
        self._require("begin_play", SessionPhase.COUNTDOWN)
        self._transition(SessionPhase.PLAYING)
        return self._session.current_mini_game

    def on_answer(self, correct: bool, response_time_ms: int, speed_bonus: float = 0.0) -> AnswerFeedback:
        """
        Resolve one question.

        Args:
            correct: Whether the player answered correctly
            response_time_ms: Answer latency
            speed_bonus: Extra base points granted by the mini-game

        Returns:
            AnswerFeedback for the next question (or the continue prompt)
        """
        self._require("on_answer", SessionPhase.PLAYING)
        session = self._session
        mode = session.mode
        tier_before = self._tier

        if mode == GameMode.ENDLESS and not correct:
            self._pending = PendingDeath(
                score=session.score,
                streak=session.streak,
                best_streak=session.best_streak,
                tier=tier_before,
                mini_game=session.current_mini_game,
            )

        state = self.engine.process_answer(correct, response_time_ms)
        points = self.ledger.record_answer(session, correct, state.game_speed, tier_before, speed_bonus)
        self._tier = self.tiers.resolve(session.streak, mode)
        tier_changed = self._tier != tier_before

        if correct:
            self._cue(SoundCue.CORRECT, HapticKind.LIGHT)
            if self._tier > tier_before:
                self._cue(SoundCue.TIER_UP, HapticKind.MEDIUM)
                logger.debug(f"Tier up: {tier_before} -> {self._tier} ({tier_label(self._tier)})")
        else:
            self._cue(SoundCue.WRONG, HapticKind.HEAVY)

        if self._pending is not None:
            self._transition(SessionPhase.CONTINUE_PENDING)
            next_game = session.current_mini_game
        else:
            next_game = self._advance_game()

        return AnswerFeedback(
            correct=correct,
            points=points,
            score=session.score,
            streak=session.streak,
            tier=self._tier,
            tier_label=tier_label(self._tier),
            tier_changed=tier_changed,
            phase=state.phase,
            difficulty=state.difficulty,
            speed_multiplier=state.game_speed,
            allowed_time_ms=self.engine.allowed_time_ms,
            next_game=next_game,
            game_params=self.tiers.params(self._tier, next_game),
            session_phase=self._phase,
        )

    def on_time_expired(self, explicit_xp: int | None = None) -> SessionSummary:
        """Classic clock ran out (PLAYING -> RESULT)."""
        if self._finished():
            return self._summary
        self._require("on_time_expired", SessionPhase.PLAYING)
        if self._session.mode != GameMode.CLASSIC:
            raise InvalidTransitionError("on_time_expired", f"{self._phase.value} (endless)")
        return self._finish(explicit_xp)

    def on_game_end(self, explicit_xp: int | None = None) -> SessionSummary:
        """
        Finish the session and merge it into player progress.

        Classic may end from PLAYING; endless only from CONTINUE_PENDING.
        Calling again in RESULT returns the same summary.

        Args:
            explicit_xp: Authoritative XP reported by the caller; wins over
                the local formula
        """
        if self._finished():
            return self._summary
        if self._phase == SessionPhase.CONTINUE_PENDING:
            return self.on_end_run(explicit_xp)
        self._require("on_game_end", SessionPhase.PLAYING)
        if self._session.mode != GameMode.CLASSIC:
            raise InvalidTransitionError("on_game_end", f"{self._phase.value} (endless)")
        return self._finish(explicit_xp)

    def dismiss_result(self) -> None:
        self._require("dismiss_result", SessionPhase.RESULT)
        self._session = None
        self._transition(SessionPhase.IDLE)

    def on_quit(self) -> None:
        """Abandon the session without recording anything."""
        self._require("on_quit", SessionPhase.COUNTDOWN, SessionPhase.PLAYING)
        logger.info("Session abandoned")
        self._session = None
        self._pending = None
        self._transition(SessionPhase.IDLE)

    # =========================================================================
    # Continue negotiation (endless)
    # =========================================================================

    def on_request_continue(self) -> ContinueOffer:
        self._require("on_request_continue", SessionPhase.CONTINUE_PENDING)
        cost = self.gate.continue_cost
        balance = self.gate.xp_balance
        return ContinueOffer(
            streak=self._pending.streak,
            score=self._pending.score,
            xp_cost=cost,
            xp_balance=balance,
            can_afford_xp=balance >= cost,
            countdown_seconds=self.continue_countdown_seconds,
        )

    async def resolve_continue(self, method: ContinueMethod) -> ContinueResolution:
        """
        Settle the continue offer.

        - "ad": show a rewarded ad; always granted
        - "xp": pay continue_cost; rejected (still pending) if unaffordable
        - "decline": end the run with the frozen tallies
        """
        if not (method == "decline" and self._finished()):
            self._require("resolve_continue", SessionPhase.CONTINUE_PENDING)

        if method == "decline":
            summary = self.on_end_run()
            return ContinueResolution(
                granted=False,
                method=method,
                session_phase=self._phase,
                xp_balance=self.gate.xp_balance,
                summary=summary,
            )

        if method == "ad":
            granted = await self.gate.continue_with_ad(self.ad_provider)
            if self._phase != SessionPhase.CONTINUE_PENDING:
                # Countdown expired while the ad was showing
                logger.info("Continue ad finished after the run ended")
                return ContinueResolution(False, method, self._phase, self.gate.xp_balance, summary=self._summary)
        elif method == "xp":
            try:
                self.gate.spend_xp()
            except InsufficientXPError as e:
                logger.info(f"Continue rejected: {e}")
                return ContinueResolution(False, method, self._phase, e.balance)
            granted = True
        else:
            raise ValueError(f"Unknown continue method: {method!r}")

        if not granted:
            return ContinueResolution(False, method, self._phase, self.gate.xp_balance)

        pending = self._consume_pending()
        session = self._session
        session.streak = pending.streak
        session.score = pending.score
        session.best_streak = max(session.best_streak, pending.best_streak)
        self._tier = self.tiers.resolve(session.streak, session.mode)
        self._transition(SessionPhase.PLAYING)
        next_game = self._advance_game()
        logger.debug(f"Continue granted via {method}; streak {session.streak} restored")
        return ContinueResolution(True, method, self._phase, self.gate.xp_balance, next_game=next_game)

    def on_end_run(self, explicit_xp: int | None = None) -> SessionSummary:
        """Player declined or the countdown expired (CONTINUE_PENDING -> RESULT)."""
        if self._finished():
            return self._summary
        self._require("on_end_run", SessionPhase.CONTINUE_PENDING)
        return self._finish(explicit_xp)

    # =========================================================================
    # Internals
    # =========================================================================

    def _finish(self, explicit_xp: int | None) -> SessionSummary:
        session = self._session
        if self._pending is not None:
            pending = self._consume_pending()
            session.streak = pending.streak
            session.score = pending.score

        adaptive_state = self.engine.state
        result = self.ledger.finalize_session(session, adaptive_state, explicit_xp)
        self.gate.record_completed_session()

        if session.mode == GameMode.CLASSIC:
            self._cue(SoundCue.COMPLETE, HapticKind.MEDIUM)
        else:
            self._cue(SoundCue.LOSE, HapticKind.HEAVY)

        self._summary = SessionSummary(
            mode=session.mode,
            score=session.score,
            correct=session.correct,
            wrong=session.wrong,
            streak=session.streak,
            best_streak=session.best_streak,
            accuracy=accuracy_percent(session.correct, session.wrong),
            xp_gained=result.xp_gained,
            is_new_high_score=result.is_new_high_score,
            peak_game_speed=result.peak_game_speed,
            final_tier=self._tier,
            duration_sec=self.engine.session_duration_sec(),
            gate_navigation=self.gate.should_gate(session.mode),
            game_breakdown={
                game.value: {"correct": tally.correct, "wrong": tally.wrong}
                for game, tally in session.game_breakdown.items()
            },
            daily_challenge_completed=result.daily_challenge_completed,
            daily_bonus_xp=result.daily_bonus_xp,
        )
        self._transition(SessionPhase.RESULT)
        return self._summary

    def _finished(self) -> bool:
        """A repeated end-of-run event finds the session already in RESULT."""
        return self._phase == SessionPhase.RESULT and self._summary is not None

    def _consume_pending(self) -> PendingDeath:
        pending = self._pending
        if pending is None:
            raise InvalidTransitionError("consume_pending", self._phase.value)
        self._pending = None
        return pending

    def _advance_game(self) -> MiniGameType:
        session = self._session
        next_game = self.selector.next_game(session.current_mini_game)
        session.current_mini_game = next_game
        self.engine.set_current_game(next_game)
        return next_game

    def _require(self, event: str, *allowed: SessionPhase) -> None:
        if self._phase not in allowed:
            raise InvalidTransitionError(event, self._phase.value)

    def _transition(self, phase: SessionPhase) -> None:
        logger.debug(f"Session {self._phase.value} -> {phase.value}")
        self._phase = phase

    def _cue(self, sound: SoundCue, haptic: HapticKind) -> None:
        """Fire-and-forget feedback; collaborator failures never reach the game."""
        try:
            self.sound.play(sound)
        except Exception as e:
            logger.warning(f"Sound '{sound.value}' failed: {e}")
        try:
            self.haptics.trigger(haptic)
        except Exception as e:
            logger.warning(f"Haptic '{haptic.value}' failed: {e}")
