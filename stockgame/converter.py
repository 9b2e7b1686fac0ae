import json

from stockgame.models.schema_models import GameStateSchema


class DataConverter:
    """This class is used to convert game state between its stored and transmitted formats."""

    def convert_gamestate_to_document(self, game_state: GameStateSchema) -> dict:
        """Convert the GameStateSchema to the JSON document stored in the game table

        Args:
            game_state (GameStateSchema): The game state

        Returns:
            dict: camelCase document, JSON-serializable
        """
        return game_state.model_dump(mode="json", by_alias=True)

    def convert_document_to_gamestate(self, document: dict | str) -> GameStateSchema:
        """Convert a stored document (or its JSON text) back to the GameStateSchema"""
        if isinstance(document, str):
            document = json.loads(document)
        return GameStateSchema.model_validate(document)

    def convert_gamestate_to_payload(self, game_state: GameStateSchema) -> str:
        # SSE payloads are single-line JSON
        return json.dumps(self.convert_gamestate_to_document(game_state))
