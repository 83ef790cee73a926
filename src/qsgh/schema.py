"""Variable schema: which values the hooks need and when each one applies."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from qsgh.errors import InvalidChoice
from qsgh.types import DependsOn, Option, VariableDescriptor

PROVIDER_VARIABLE = "QSGH_LLM_PROVIDER"

# Provider → display name, in menu order
PROVIDER_OPTIONS: tuple[Option, ...] = (
    Option(value="openai", label="OpenAI"),
    Option(value="anthropic", label="Anthropic"),
)


@dataclass(frozen=True, slots=True)
class ConfigSchema:
    """Ordered list of variable descriptors with a single choice selector."""

    descriptors: tuple[VariableDescriptor, ...]
    selector: str = PROVIDER_VARIABLE

    def __post_init__(self) -> None:
        names = [d.name for d in self.descriptors]
        if len(names) != len(set(names)):
            raise ValueError("Duplicate variable names in schema")
        if self.selector not in names:
            raise ValueError(f"Selector {self.selector} is not part of the schema")
        if not self.get(self.selector).is_choice:
            raise ValueError(f"Selector {self.selector} has no options")

    def __iter__(self) -> Iterator[VariableDescriptor]:
        return iter(self.descriptors)

    def __len__(self) -> int:
        return len(self.descriptors)

    def get(self, name: str) -> VariableDescriptor:
        for descriptor in self.descriptors:
            if descriptor.name == name:
                return descriptor
        raise KeyError(name)

    @property
    def selector_descriptor(self) -> VariableDescriptor:
        return self.get(self.selector)

    @property
    def options(self) -> tuple[Option, ...]:
        return self.selector_descriptor.options

    def option_values(self) -> list[str]:
        return [opt.value for opt in self.options]

    def option_for_selection(self, text: str) -> Option:
        """Map operator input (1-based number or the option value) to an option.

        Raises InvalidChoice for anything outside the option set.
        """
        answer = text.strip()
        if answer.isdecimal():
            index = int(answer)
            if 1 <= index <= len(self.options):
                return self.options[index - 1]
        for opt in self.options:
            if answer == opt.value:
                return opt
        raise InvalidChoice(answer)

    def conditional_for(self, value: str) -> list[VariableDescriptor]:
        """Return the descriptors gated on the selector having `value`.

        Raises InvalidChoice when `value` is not one of the known options.
        """
        if value not in self.option_values():
            raise InvalidChoice(value, variable=self.selector)
        return [
            d
            for d in self.descriptors
            if d.depends_on is not None
            and d.depends_on.variable == self.selector
            and d.depends_on.value == value
        ]

    def applicable(self, values: Mapping[str, str]) -> list[VariableDescriptor]:
        """Descriptors (selector excluded) that apply given the resolved values.

        Conditional descriptors come first, then unconditional ones, each in
        schema order.
        """
        provider = values.get(self.selector)
        conditional = self.conditional_for(provider) if provider is not None else []
        plain = [
            d for d in self.descriptors if d.name != self.selector and d.depends_on is None
        ]
        return [*conditional, *plain]


def build_schema(descriptors: Iterable[VariableDescriptor], selector: str = PROVIDER_VARIABLE) -> ConfigSchema:
    """Construct a schema from any iterable of descriptors."""
    return ConfigSchema(descriptors=tuple(descriptors), selector=selector)


DEFAULT_SCHEMA = build_schema(
    [
        VariableDescriptor(
            name=PROVIDER_VARIABLE,
            description="LLM provider",
            options=PROVIDER_OPTIONS,
        ),
        VariableDescriptor(
            name="QSGH_API_KEY",
            description="OpenAI API key for generating PR descriptions",
            depends_on=DependsOn(PROVIDER_VARIABLE, "openai"),
            secret=True,
        ),
        VariableDescriptor(
            name="QSGH_ANTHROPIC_API_KEY",
            description="Anthropic API key for generating PR descriptions",
            depends_on=DependsOn(PROVIDER_VARIABLE, "anthropic"),
            secret=True,
        ),
        VariableDescriptor(
            name="QSGH_BITBUCKET_USERNAME",
            description="Your Bitbucket username",
        ),
        VariableDescriptor(
            name="QSGH_BITBUCKET_APP_PASSWORD",
            description="Your Bitbucket app password",
            secret=True,
        ),
        VariableDescriptor(
            name="QSGH_DEFAULT_DESTINATION_BRANCH",
            description="Default branch for pull requests (e.g., development)",
        ),
    ]
)
