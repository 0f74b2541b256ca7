"""Agentic refinement loop: generate, analyze, fuse, decide, refine.

A run is strictly sequential. Only the analysis phase fans out: the
internal analyzer and the external detector run on two worker threads
under one shared deadline, and each branch is collected on its own, so
one branch failing never cancels the other or the run.
"""

import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence

from ..critic.analysis import AnalysisResult, DetectorResult, default_analysis
from ..critic.fusion import ScoreFusion
from ..exceptions import RequestTimeoutError, ValidationError
from ..generator.prompt_builder import PromptAssembler, build_feedback, build_style_context
from ..style.analyzer import StylometricAnalyzer
from ..style.comparator import ProfileComparator
from ..style.composite import CompositeProfileBuilder
from ..style.profile import EMPTY_PROFILE, StylometricProfile
from ..utils.logging import get_logger
from .retry import RetryPolicy, call_with_retry
from .workflow import StepCallback, StepStatus, WorkflowLog, WorkflowStep

logger = get_logger(__name__)

LABEL_GENERATION = "Generation (draft)"
LABEL_ANALYSIS = "Analysis & detection"
LABEL_SETUP = "Setup"


class RunState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    ANALYZING = "analyzing"
    REFINING = "refining"
    TARGET_MET = "target_met"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"
    FAILED = "failed"


# Capability contracts

class Generator(Protocol):
    def generate(self, system_prompt: str, user_prompt: str, temperature: Optional[float] = None) -> str: ...


class Analyzer(Protocol):
    def analyze(self, system_prompt: str, user_prompt: str) -> AnalysisResult: ...


class Detector(Protocol):
    def detect(self, text: str) -> Optional[DetectorResult]: ...


class ReferenceProvider(Protocol):
    def documents(self) -> Sequence[Any]: ...


@dataclass
class AgenticConfig:
    enabled: bool = True
    target_score: int = 92
    max_iterations: int = 3
    analysis_timeout: float = 90.0
    retry_attempts: int = 3
    retry_initial_delay: float = 1.0
    min_length_ratio: float = 0.5
    reanalysis_delay: float = 0.0

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "AgenticConfig":
        section = (config or {}).get("agentic", {})
        defaults = cls()
        return cls(**{name: section.get(name, getattr(defaults, name)) for name in defaults.__dataclass_fields__})

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(attempts=self.retry_attempts, initial_delay=self.retry_initial_delay)


@dataclass
class BranchResult:
    """Outcome of one analysis branch: a value or the error that replaced it."""
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class IterationState:
    """Mutable state of a single run. Never shared between runs."""
    current_text: str = ""
    current_analysis: Optional[AnalysisResult] = None
    iteration_count: int = 0
    best_text: str = ""
    best_analysis: Optional[AnalysisResult] = None
    last_external: Optional[DetectorResult] = None

    def record(self, text: str, analysis: AnalysisResult) -> None:
        self.current_text = text
        self.current_analysis = analysis
        if self.best_analysis is None or analysis.score > self.best_analysis.score:
            self.best_text = text
            self.best_analysis = analysis


@dataclass
class GenerationOutput:
    text: str
    analysis: AnalysisResult
    state: RunState
    target_met: bool
    iterations: int
    steps: List[WorkflowStep] = field(default_factory=list)


@dataclass
class _RunContext:
    target_profile: StylometricProfile
    assembler: PromptAssembler
    log: WorkflowLog
    state: IterationState = field(default_factory=IterationState)
    run_state: RunState = RunState.IDLE


class RefinementController:
    """Drives a text toward a target humanness score.

    Args:
        generator: Generator capability for the first draft (required for run()).
        refiner: Generator capability for rewrites; no refiner means no rewrites.
        analyzer: Analyzer capability; None means the default analysis every round.
        detector: External detector capability; None means no external judge.
        target_profile: Target profile when no reference library is passed to run().
        style_context: Prompt context matching target_profile.
        config: Loop settings.
        on_step: Observer for WorkflowStep records.
        sleep: Sleep function used for backoff and re-analysis pauses.
    """

    def __init__(
        self,
        generator: Optional[Generator] = None,
        refiner: Optional[Generator] = None,
        analyzer: Optional[Analyzer] = None,
        detector: Optional[Detector] = None,
        target_profile: Optional[StylometricProfile] = None,
        style_context: str = "",
        config: Optional[AgenticConfig] = None,
        on_step: Optional[StepCallback] = None,
        profile_analyzer: Optional[StylometricAnalyzer] = None,
        comparator: Optional[ProfileComparator] = None,
        fusion: Optional[ScoreFusion] = None,
        sleep=time.sleep,
    ):
        self.generator = generator
        self.refiner = refiner
        self.analyzer = analyzer
        self.detector = detector
        self.target_profile = target_profile or EMPTY_PROFILE
        self.style_context = style_context
        self.config = config or AgenticConfig()
        self.on_step = on_step
        self.profile_analyzer = profile_analyzer or StylometricAnalyzer()
        self.comparator = comparator or ProfileComparator()
        self.fusion = fusion or ScoreFusion()
        self.sleep = sleep
        self.analysis_system_prompt = PromptAssembler.analysis_system_prompt()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def run(self, topic: str, library: Optional[ReferenceProvider] = None) -> GenerationOutput:
        """Generate a text on topic and refine it until the target score or the iteration cap.

        Raises:
            ValidationError: No generator configured or a capability is misconfigured.
            ProviderError: Generation or refinement failed after all retries.
        """
        ctx = self._new_context(library)
        if self.generator is None:
            ctx.run_state = RunState.FAILED
            ctx.log.add(LABEL_SETUP, StepStatus.ERROR, "No model assigned to the generator role")
            raise ValidationError("No model assigned to the generator role")

        ctx.run_state = RunState.GENERATING
        model = self._model_name(self.generator)
        ctx.log.add(LABEL_GENERATION, StepStatus.RUNNING, "Drafting under stylometric constraints", model)
        system_prompt, user_prompt = ctx.assembler.generation_prompts(topic)
        text = self._call_model(ctx, LABEL_GENERATION, self.generator, system_prompt, user_prompt)
        ctx.log.add(LABEL_GENERATION, StepStatus.SUCCESS, f"Draft generated ({len(text)} chars)", model)

        analysis = self._analyze_round(ctx, text)
        ctx.state.record(text, analysis)
        return self._refine_loop(ctx)

    def analyze_text(self, text: str) -> AnalysisResult:
        """Run one analysis round (parallel scoring, fusion, stylometric match) on a text."""
        ctx = self._new_context(None)
        return self._analyze_round(ctx, text)

    def refine_once(self, text: str, analysis: AnalysisResult) -> GenerationOutput:
        """Apply a single refinement and re-analysis pass to a caller-supplied text.

        Raises:
            ValidationError: No refiner configured.
        """
        if self.refiner is None:
            raise ValidationError("No model assigned to the refiner role")
        ctx = self._new_context(None)
        if analysis.external is not None and analysis.external.ok:
            ctx.state.last_external = analysis.external
        ctx.state.record(text, analysis)
        self._refine_step(ctx, max_iterations=1)
        met = ctx.state.current_analysis.score >= self.config.target_score
        return GenerationOutput(
            text=ctx.state.current_text,
            analysis=ctx.state.current_analysis,
            state=RunState.TARGET_MET if met else RunState.MAX_ITERATIONS_REACHED,
            target_met=met,
            iterations=ctx.state.iteration_count,
            steps=ctx.log.steps,
        )

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def _refine_loop(self, ctx: _RunContext) -> GenerationOutput:
        cfg = self.config
        max_iterations = cfg.max_iterations if (cfg.enabled and self.refiner is not None) else 0

        while True:
            current = ctx.state.current_analysis
            if current.score >= cfg.target_score:
                ctx.run_state = RunState.TARGET_MET
                return GenerationOutput(
                    text=ctx.state.current_text,
                    analysis=current,
                    state=ctx.run_state,
                    target_met=True,
                    iterations=ctx.state.iteration_count,
                    steps=ctx.log.steps,
                )
            if ctx.state.iteration_count >= max_iterations:
                ctx.run_state = RunState.MAX_ITERATIONS_REACHED
                best = ctx.state.best_analysis
                if max_iterations > 0:
                    ctx.log.add(
                        "Refinement",
                        StepStatus.WARNING,
                        f"Target {cfg.target_score}% not reached after {ctx.state.iteration_count} "
                        f"iterations; keeping best score {best.score}%",
                    )
                return GenerationOutput(
                    text=ctx.state.best_text,
                    analysis=best,
                    state=ctx.run_state,
                    target_met=False,
                    iterations=ctx.state.iteration_count,
                    steps=ctx.log.steps,
                )
            self._refine_step(ctx, max_iterations)

    def _refine_step(self, ctx: _RunContext, max_iterations: int) -> None:
        ctx.run_state = RunState.REFINING
        state = ctx.state
        state.iteration_count += 1
        iteration = state.iteration_count
        label = f"Refinement ({iteration}/{max_iterations})"
        model = self._model_name(self.refiner)

        current = state.current_analysis
        external = current.external
        if external is not None and external.ok and not external.is_real:
            reason = f"Detector flagged {external.fake_percentage:.0f}% AI."
        else:
            reason = f"Score {current.score}% below target {self.config.target_score}%."
        ctx.log.add(label, StepStatus.RUNNING, f"{reason} Rewriting...", model)

        feedback = build_feedback(current)
        system_prompt, user_prompt = ctx.assembler.refinement_prompts(state.current_text, feedback, attempt=iteration)
        refined = self._call_model(ctx, label, self.refiner, system_prompt, user_prompt)

        previous = state.current_text
        if len(refined) < self.config.min_length_ratio * len(previous):
            ctx.log.add(
                label,
                StepStatus.WARNING,
                f"Refinement discarded: {len(refined)} chars is under "
                f"{self.config.min_length_ratio:.0%} of the previous {len(previous)} chars",
                model,
            )
            return

        if self.config.reanalysis_delay > 0:
            self.sleep(self.config.reanalysis_delay)

        analysis = self._analyze_round(ctx, refined)
        state.record(refined, analysis)

        if analysis.score >= self.config.target_score:
            ctx.log.add(label, StepStatus.SUCCESS, f"Target reached: {analysis.score}%", model)
        else:
            status = StepStatus.WARNING if iteration >= max_iterations else StepStatus.PENDING
            ctx.log.add(label, status, f"New score: {analysis.score}%", model)

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _call_model(self, ctx: _RunContext, label: str, model: Generator, system_prompt: str, user_prompt: str) -> str:
        def on_retry(attempt, error, delay):
            ctx.log.add(label, StepStatus.WARNING, f"Attempt {attempt} failed ({error}); retrying in {delay:.0f}s")

        try:
            return call_with_retry(
                lambda: model.generate(system_prompt, user_prompt),
                policy=self.config.retry_policy,
                sleep=self.sleep,
                on_retry=on_retry,
            )
        except Exception as e:
            ctx.run_state = RunState.FAILED
            ctx.log.add(label, StepStatus.ERROR, str(e), self._model_name(model))
            raise

    def _analyze_round(self, ctx: _RunContext, text: str) -> AnalysisResult:
        ctx.run_state = RunState.ANALYZING
        model = self._model_name(self.analyzer) if self.analyzer is not None else None
        ctx.log.add(LABEL_ANALYSIS, StepStatus.RUNNING, "Internal analysis + external detector", model)

        internal_branch, external_branch = self._gather(text)
        problems = []

        if self.analyzer is None:
            internal = default_analysis("Analyzer not configured")
            problems.append("analyzer not configured")
        elif internal_branch.ok:
            internal = internal_branch.value
        elif isinstance(internal_branch.error, ValidationError):
            ctx.run_state = RunState.FAILED
            ctx.log.add(LABEL_ANALYSIS, StepStatus.ERROR, str(internal_branch.error), model)
            raise internal_branch.error
        else:
            error = internal_branch.error
            internal = default_analysis(f"Analyzer failed: {error}")
            problems.append(f"analyzer failed ({type(error).__name__}: {error})")

        if external_branch.ok:
            external = external_branch.value
            if external is not None and not external.ok:
                problems.append(f"detector failed ({external.error})")
        else:
            error = external_branch.error
            external = DetectorResult(error=str(error) or type(error).__name__)
            problems.append(f"detector failed ({type(error).__name__}: {error})")

        score = self.fusion.fuse(internal.score, external, ctx.state.last_external)
        if external is not None and external.ok:
            ctx.state.last_external = external

        match = None
        if not ctx.target_profile.is_empty:
            match = self.comparator.compare(ctx.target_profile, self.profile_analyzer.analyze(text))

        analysis = replace(
            internal.with_score(score),
            external=external,
            stylometric_match=match,
            degraded=internal.degraded or bool(problems),
        )

        if problems:
            ctx.log.add(LABEL_ANALYSIS, StepStatus.WARNING, "Degraded result: " + "; ".join(problems), model)

        details = f"Overall score: {score}%"
        if external is not None and external.ok:
            details += f" (detector: {external.fake_percentage:.0f}% AI)"
        if match is not None:
            details += f", style similarity {match.similarity:.0f}%"
        ctx.log.add(LABEL_ANALYSIS, StepStatus.SUCCESS, details, model)
        return analysis

    def _gather(self, text: str):
        """Run analyzer and detector concurrently under one deadline.

        Returns:
            (internal BranchResult, external BranchResult). A branch that is not
            configured succeeds with None.
        """
        timeout = self.config.analysis_timeout
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="analysis")
        try:
            futures = {}
            if self.analyzer is not None:
                futures["internal"] = executor.submit(self.analyzer.analyze, self.analysis_system_prompt, text)
            if self.detector is not None:
                futures["external"] = executor.submit(self.detector.detect, text)

            done, _ = wait(list(futures.values()), timeout=timeout)

            results = {"internal": BranchResult(), "external": BranchResult()}
            for name, future in futures.items():
                if future in done:
                    error = future.exception()
                    results[name] = BranchResult(error=error) if error is not None else BranchResult(value=future.result())
                else:
                    future.cancel()
                    results[name] = BranchResult(error=RequestTimeoutError(f"{name} analysis exceeded {timeout}s deadline"))
            return results["internal"], results["external"]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _new_context(self, library: Optional[ReferenceProvider]) -> _RunContext:
        target = self.target_profile
        style_context = self.style_context
        log = WorkflowLog(self.on_step)
        if library is not None:
            documents = list(library.documents())
            texts = [d.text for d in documents]
            weights = [d.weight for d in documents]
            target = CompositeProfileBuilder(self.profile_analyzer).build(texts, weights)
            style_context = build_style_context([(d.name, d.text, d.weight) for d in documents])
            log.add(LABEL_SETUP, StepStatus.SUCCESS, f"Target profile built from {len(documents)} reference documents")
        return _RunContext(target_profile=target, assembler=PromptAssembler(target, style_context), log=log)

    @staticmethod
    def _model_name(capability) -> Optional[str]:
        return getattr(capability, "name", None) or type(capability).__name__
