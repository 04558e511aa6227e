"""Parsing of git command suggestions."""

from __future__ import annotations

from dataclasses import dataclass, field

COMMAND_MARKER = "\nCOMMAND:"
EXPLANATION_MARKER = "\nEXPLANATION:"
NOTE_MARKER = "\nNOTE:"
TIP_MARKER = "\nADDITIONAL TIP:"

IMPORTANT_KEYWORDS = ("CAREFUL", "WARNING", "IMPORTANT", "DO NOT", "caution")


def is_important(text: str) -> bool:
	"""Whether a note or tip carries a warning worth showing."""
	return any(keyword in text for keyword in IMPORTANT_KEYWORDS)


@dataclass(frozen=True)
class CommandStep:
	"""One suggested command."""

	command: str
	explanation: str
	note: str = ""


@dataclass(frozen=True)
class CommandSuggestion:
	"""A parsed suggestion: optional introduction, steps and a closing tip."""

	intro: str = ""
	steps: list[CommandStep] = field(default_factory=list)
	tip: str = ""
	raw: str = ""

	@property
	def is_structured(self) -> bool:
		"""Whether any COMMAND/EXPLANATION step was found."""
		return bool(self.steps)


def parse_suggestion(text: str) -> CommandSuggestion:
	"""
	Split a model response in the COMMAND/EXPLANATION/NOTE format.

	Sections without an explanation are ignored. A trailing
	``ADDITIONAL TIP:`` paragraph is split off into ``tip``.

	Args:
	    text: Raw model output

	Returns:
	    CommandSuggestion: The parsed suggestion (no steps when the
	        response is not in the expected format)
	"""
	body = "\n" + text
	tip = ""
	tip_index = body.find(TIP_MARKER)
	if tip_index != -1:
		tip = body[tip_index + len(TIP_MARKER) :].strip()
		body = body[:tip_index]

	sections = body.split(COMMAND_MARKER)
	steps = []
	for section in sections[1:]:
		command, sep, rest = section.partition(EXPLANATION_MARKER)
		if not sep:
			continue
		explanation, _, note = rest.partition(NOTE_MARKER)
		steps.append(CommandStep(command=command.strip(), explanation=explanation.strip(), note=note.strip()))

	return CommandSuggestion(intro=sections[0].strip(), steps=steps, tip=tip, raw=text.strip())
