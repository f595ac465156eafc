"""bayesfilter command-line interface."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from . import __version__
from .classifiers.base import ClassifierSettings
from .config import Config, ConfigError, build_classifier, load_config
from .corpus import Sample, read_corpus, tokenize
from .errors import CorpusError
from .logging import configure_logging
from .trainer import Trainer

app = typer.Typer(help="Naive Bayes message classification utilities.")


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None


@app.callback()
def _bayesfilter(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to config (env BAYESFILTER_CONFIG or ~/.config/bayesfilter/config.yaml).",
        ),
    ] = None,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(config_path=resolved)


@app.command("train-eval")
def train_eval(
    ctx: typer.Context,
    corpus: Annotated[Path, typer.Argument(..., help="Tab-separated '<label>\\t<text>' corpus.")],
    stop_words: Annotated[
        int | None,
        typer.Option("--stop-words", min=0, help="Override the number of stop words to purge."),
    ] = None,
    show_mispredictions: Annotated[
        bool,
        typer.Option("--show-mispredictions", help="List every misclassified sample."),
    ] = False,
) -> None:
    """Train on a corpus and report how well it classifies its own samples."""

    config = _load_environment(_state(ctx))
    samples = _read_samples(corpus)
    trainer, classifier = _train(config, samples, stop_words)

    result = trainer.evaluate(samples, classifier)
    typer.echo(f"→ bayesfilter {__version__}")
    for label, count in sorted(trainer.message_counts.items()):
        prior = trainer.classes[label].probability
        typer.echo(f"{label}: {count} message(s), base probability {prior:.2%}")
    typer.echo(f"Stop words: {len(trainer.stop_words)}")
    typer.echo(f"Correct predictions: {result.correct}/{result.total} ({result.accuracy:.2%})")
    typer.echo(f"Mispredictions: {result.wrong}/{result.total}")
    if result.skipped:
        typer.echo(f"Skipped (no tokens): {result.skipped}")
    if show_mispredictions and result.mispredictions:
        typer.echo("")
        for miss in result.mispredictions:
            summary = f"{miss.sample.label} → {miss.predicted} {miss.probability:.2%}"
            typer.echo(f"- [{summary}] {miss.sample.text}")


@app.command()
def classify(
    ctx: typer.Context,
    corpus: Annotated[Path, typer.Argument(..., help="Tab-separated '<label>\\t<text>' corpus.")],
    text: Annotated[str, typer.Argument(..., help="Message text to classify.")],
) -> None:
    """Train on a corpus, then print class probabilities for a message."""

    config = _load_environment(_state(ctx))
    trainer, classifier = _train(config, _read_samples(corpus), None)
    tokens = trainer.prepare(tokenize(text))
    if not tokens:
        typer.secho("Message contains no usable tokens.", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(1)

    results = sorted(
        classifier.calculate_document_probabilities(tokens),
        key=lambda result: result.probability,
        reverse=True,
    )
    best = classifier.classify(tokens)
    typer.echo(f"Tokens: {len(tokens)}")
    for result in results:
        typer.echo(f"  {result.cls.name}: {result.probability:.4f}")
    if best is not None:
        typer.echo(f"Decision: {best.cls.name}")


def _train(
    config: Config, samples: list[Sample], stop_words: int | None
) -> tuple[Trainer, ClassifierSettings]:
    trainer = Trainer()
    classifier = build_classifier(config, trainer.training_set)
    trainer.train(samples)
    trainer.eliminate_stop_words(config.stop_words if stop_words is None else stop_words)
    trainer.assign_class_probabilities(config.class_probabilities)
    return trainer, classifier


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _load_environment(state: CLIState) -> Config:
    try:
        config = load_config(state.config_path)
        configure_logging(config.logging)
    except ConfigError as exc:
        _config_failure(exc)
    return config


def _read_samples(path: Path) -> list[Sample]:
    try:
        samples = read_corpus(path)
    except CorpusError as exc:
        typer.secho(f"Corpus error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc
    if not samples:
        typer.secho(f"Corpus is empty: {path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)
    return samples


def _config_failure(exc: ConfigError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


__all__ = ["app"]
