"""Keyword rules for the history-focused categorizer."""

from classify_articles.classify_articles import KeywordCategorizer

HISTORY_RULES = {
    "wars": ("war", "battle", "siege", "campaign", "conflict", "military"),
    "empires": ("empire", "kingdom", "dynasty", "emperor", "king", "queen"),
    "ancient": ("ancient", "civilization", "bc", "egypt", "rome", "greece"),
    "medieval": ("medieval", "middle ages", "crusade", "feudal", "knight"),
    "politics": ("president", "democracy", "republic", "revolution", "independence", "treaty"),
    "culture": ("culture", "heritage", "monument", "archaeology", "museum"),
}


class HistoryCategorizer(KeywordCategorizer):
    """Wars, empires, civilizations, historical figures and cultural heritage."""

    def __init__(self):
        super().__init__(HISTORY_RULES)
