"""
Exception hierarchy for recall.

Validation errors are raised before any mutation happens, so a caller that
catches one can assume the store is unchanged.
"""


class RecallError(Exception):
    pass


class DeckValidationError(RecallError, ValueError):
    pass


class InvalidDeckNameError(DeckValidationError):
    def __init__(self, name: str):
        super().__init__(f"Invalid deck name: {name}")
        self.name = name


class DuplicateDeckNameError(DeckValidationError):
    def __init__(self, name: str):
        super().__init__(f"Deck name already exists: {name}")
        self.name = name


class DeckNotFoundError(RecallError, KeyError):
    def __init__(self, message: str, deck_id: str):
        super().__init__(message)
        self.deck_id = deck_id

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class CardNotFoundError(RecallError, KeyError):
    def __init__(self, deck_id: str, card_id: str):
        super().__init__(f"No card in deck with card id found: {card_id}")
        self.deck_id = deck_id
        self.card_id = card_id

    def __str__(self) -> str:
        return str(self.args[0])


class UnsupportedRatingError(RecallError, ValueError):
    pass


class InvalidParametersError(RecallError, ValueError):
    pass
