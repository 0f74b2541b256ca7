"""Command-line entry point.

    humanizer generate "remote work" --library library/ -o out.txt
    humanizer analyze draft.txt
    humanizer profile reference1.txt reference2.txt --json
    humanizer compare reference.txt draft.txt
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .agent.controller import AgenticConfig, RefinementController
from .agent.workflow import StepStatus, WorkflowStep
from .config import DEFAULT_CONFIG_PATH, load_config
from .corpus.library import ReferenceLibrary
from .critic.analyzer_client import LLMAnalyzer
from .critic.detector import ZeroGPTDetector
from .exceptions import HumanizerError
from .generator.llm_provider import ROLE_ANALYZER, ROLE_GENERATOR, ROLE_REFINER, LLMProvider
from .style.analyzer import StylometricAnalyzer
from .style.cache import configure_default_cache, default_cache
from .style.comparator import ProfileComparator
from .style.composite import CompositeProfileBuilder
from .utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

STATUS_MARKS = {
    StepStatus.PENDING: "…",
    StepStatus.RUNNING: "▶",
    StepStatus.SUCCESS: "✓",
    StepStatus.WARNING: "⚠",
    StepStatus.ERROR: "✗",
}


def print_step(step: WorkflowStep) -> None:
    model = f" [{step.model}]" if step.model else ""
    print(f"{STATUS_MARKS[step.status]} {step.label}{model}: {step.details}")


def _read(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def build_controller(config: dict, args: argparse.Namespace) -> RefinementController:
    """Wire the default capabilities from configuration."""
    agentic = AgenticConfig.from_config(config)
    if getattr(args, "target", None) is not None:
        agentic.target_score = args.target
    if getattr(args, "max_iterations", None) is not None:
        agentic.max_iterations = args.max_iterations

    provider = LLMProvider(config=config)
    analyzer_model = provider.for_role(ROLE_ANALYZER)
    detector = ZeroGPTDetector(config=config)
    comparator = ProfileComparator(top_n=config.get("comparator", {}).get("top_n", 3))

    return RefinementController(
        generator=provider.for_role(ROLE_GENERATOR),
        refiner=provider.for_role(ROLE_REFINER),
        analyzer=LLMAnalyzer(analyzer_model) if analyzer_model is not None else None,
        detector=detector if detector.enabled else None,
        config=agentic,
        on_step=print_step,
        comparator=comparator,
    )


def cmd_generate(config: dict, args: argparse.Namespace) -> int:
    controller = build_controller(config, args)
    library = ReferenceLibrary.from_config(config, root=args.library)
    output = controller.run(args.topic, library=library)

    if args.output:
        Path(args.output).write_text(output.text, encoding="utf-8")
        print(f"Wrote {len(output.text)} chars to {args.output}")
    else:
        print()
        print(output.text)

    verdict = "target met" if output.target_met else "below target"
    print(f"\nFinal score: {output.analysis.score}% ({verdict}, {output.iterations} refinements)")
    return 0 if output.target_met else 2


def cmd_analyze(config: dict, args: argparse.Namespace) -> int:
    controller = build_controller(config, args)
    library = ReferenceLibrary.from_config(config, root=args.library)
    documents = library.documents()
    if documents:
        controller.target_profile = CompositeProfileBuilder().build(
            [d.text for d in documents], [d.weight for d in documents]
        )
    analysis = controller.analyze_text(_read(args.file))
    print(json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_profile(config: dict, args: argparse.Namespace) -> int:
    texts = [_read(path) for path in args.files]
    if len(texts) == 1:
        profile = StylometricAnalyzer().analyze(texts[0])
    else:
        profile = CompositeProfileBuilder().build(texts)

    if args.json:
        print(json.dumps(profile.to_dict(), indent=2))
        return 0

    for name, value in profile.to_dict().items():
        if name == "punctuation":
            for key, ratio in value.items():
                print(f"  punctuation.{key:<13} {ratio:10.3f}")
        else:
            print(f"  {name:<25} {value:10.3f}")
    return 0


def cmd_compare(config: dict, args: argparse.Namespace) -> int:
    analyzer = StylometricAnalyzer()
    comparator = ProfileComparator(top_n=config.get("comparator", {}).get("top_n", 3))
    result = comparator.compare(analyzer.analyze(_read(args.target)), analyzer.analyze(_read(args.actual)))
    print(f"Similarity: {result.similarity:.1f}%")
    for deviation in result.deviations:
        print(
            f"  [{deviation.severity:>6}] {deviation.metric}: expected {deviation.expected:.3f}, "
            f"actual {deviation.actual:.3f} ({deviation.deviation_pct:.1f}%)"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="humanizer", description="Stylometric text humanizer")
    parser.add_argument("-c", "--config", default=DEFAULT_CONFIG_PATH, help="Path to config.json")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate and refine a text on a topic")
    generate.add_argument("topic")
    generate.add_argument("--library", help="Reference library directory")
    generate.add_argument("--target", type=int, help="Target humanness score (0-100)")
    generate.add_argument("--max-iterations", type=int, help="Maximum refinement cycles")
    generate.add_argument("-o", "--output", help="Write the final text to this file")
    generate.set_defaults(func=cmd_generate)

    analyze = subparsers.add_parser("analyze", help="Score an existing text")
    analyze.add_argument("file")
    analyze.add_argument("--library", help="Reference library directory")
    analyze.set_defaults(func=cmd_analyze)

    profile = subparsers.add_parser("profile", help="Print the stylometric profile of one or more texts")
    profile.add_argument("files", nargs="+")
    profile.add_argument("--json", action="store_true")
    profile.set_defaults(func=cmd_profile)

    compare = subparsers.add_parser("compare", help="Compare a text against a reference text")
    compare.add_argument("target")
    compare.add_argument("actual")
    compare.set_defaults(func=cmd_compare)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    configure_logging("DEBUG" if args.verbose else config.get("logging", {}).get("level"))
    configure_default_cache(config)

    try:
        return args.func(config, args)
    except HumanizerError as e:
        logger.debug(f"{args.command} failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        logger.debug(f"Profile cache: {default_cache.stats()}")


if __name__ == "__main__":
    sys.exit(main())
