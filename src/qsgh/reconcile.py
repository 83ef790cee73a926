"""Configuration reconciler — merges persisted values with operator answers."""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from qsgh.config import ConfigFile, PersistedConfig
from qsgh.errors import MissingValue
from qsgh.prompt import InputSource
from qsgh.schema import ConfigSchema
from qsgh.types import RunMode, VariableDescriptor

logger = structlog.get_logger()


def _choice_hint(count: int) -> str:
    numbers = [str(i) for i in range(1, count + 1)]
    if len(numbers) == 1:
        return numbers[0]
    return f"{', '.join(numbers[:-1])} or {numbers[-1]}"


def _select_option(schema: ConfigSchema, prompt: InputSource) -> str:
    selector = schema.selector_descriptor
    prompt.write_prompt(f"Select {selector.description}:")
    for index, opt in enumerate(schema.options, start=1):
        prompt.write_prompt(f"{index}) {opt.label}")
    prompt.write_prompt(f"Enter choice ({_choice_hint(len(schema.options))}): ")
    return schema.option_for_selection(prompt.read_line()).value


def _ask(descriptor: VariableDescriptor, prompt: InputSource) -> str:
    prompt.write_prompt(f"Enter {descriptor.name} ({descriptor.description}): ")
    value = prompt.read_line(secret=descriptor.secret).strip()
    if descriptor.required and not value:
        raise MissingValue(descriptor.name)
    return value


def reconcile(
    schema: ConfigSchema,
    existing: Mapping[str, str],
    mode: RunMode,
    prompt: InputSource,
    store: ConfigFile,
) -> PersistedConfig:
    """Produce a complete configuration, prompting only for what is missing.

    In FRESH mode `existing` is ignored; the caller is expected to have
    cleared `store` beforehand. In INCREMENTAL mode every key already in
    `existing` is kept as is and never re-prompted. Each accepted answer is
    appended to `store` immediately, so a failure part-way leaves the
    answers given so far on disk.

    Raises:
        InvalidChoice: selection outside the option set, or a persisted
            selector value the schema does not know.
        MissingValue: a required variable was answered empty, or is saved
            empty (INCREMENTAL mode).
        PersistFailure: `store` could not be written.
    """
    values: PersistedConfig = {} if mode is RunMode.FRESH else dict(existing)
    logger.debug("reconcile_started", mode=str(mode), existing=len(values))

    if schema.selector not in values:
        choice = _select_option(schema, prompt)
        store.append(schema.selector, choice)
        values[schema.selector] = choice
    else:
        logger.debug("variable_already_set", variable=schema.selector)

    # Fails on an unknown selector value before anything else is asked
    for descriptor in schema.applicable(values):
        if descriptor.name in values:
            # Saved lines are never rewritten, so an empty saved value needs a reset
            if descriptor.required and not values[descriptor.name]:
                raise MissingValue(descriptor.name, hint="run setup with --reset to enter it again")
            logger.debug("variable_already_set", variable=descriptor.name)
            continue
        answer = _ask(descriptor, prompt)
        store.append(descriptor.name, answer)
        values[descriptor.name] = answer

    logger.debug("reconcile_finished", variables=len(values))
    return values
