from enum import StrEnum


class Program(StrEnum):
    VOTE_ON_RUBY = "[Taiko] Vote on Ruby"
    VIEW_DASHBOARD = "[Taiko] View Trailblazers Dashboard"
    EXIT = "Exit"


class Goal(StrEnum):
    """Programs that can run without prompts, by their command-line name."""
    VOTE_ON_RUBY = "vote-on-ruby"


class VotesMode(StrEnum):
    MAXIMIZE = "Maximize the number of votes to cast"
    FIXED = "Enter the number of votes to cast"
