import json

import pytest

from snake_arena import protocol
from snake_arena.grid import Direction


class TestParseClientMessage:
    def test_move_direction_is_parsed(self):
        payload = protocol.parse_client_message('{"type": "move", "direction": "UP"}')
        assert payload["direction"] is Direction.UP

    def test_move_accepts_bytes(self):
        payload = protocol.parse_client_message(b'{"type": "move", "direction": "left"}')
        assert payload["direction"] is Direction.LEFT

    def test_new_player_name_is_stringified(self):
        payload = protocol.parse_client_message('{"type": "newPlayer", "name": 42}')
        assert payload["name"] == "42"

    def test_new_player_without_name_gets_empty_string(self):
        payload = protocol.parse_client_message('{"type": "newPlayer"}')
        assert payload["name"] == ""

    @pytest.mark.parametrize("raw", ["null", "false", "0"])
    def test_falsy_name_counts_as_no_name(self, raw):
        payload = protocol.parse_client_message('{"type": "newPlayer", "name": ' + raw + "}")
        assert payload["name"] == ""

    @pytest.mark.parametrize(
        "message",
        [
            "not json",
            "[1, 2, 3]",
            '{"type": "teleport"}',
            '{"direction": "UP"}',
            '{"type": "move", "direction": "SIDEWAYS"}',
            '{"type": "move"}',
        ],
    )
    def test_malformed_messages_raise_value_error(self, message):
        with pytest.raises(ValueError):
            protocol.parse_client_message(message)


def test_encode_init():
    assert json.loads(protocol.encode_init("abc", 400, 400, 20)) == {
        "type": "init",
        "id": "abc",
        "width": 400,
        "height": 400,
        "cellSize": 20,
    }


def test_encode_client_message_round_trips_through_the_parser():
    message = protocol.encode_client_message("move", direction="DOWN")
    assert protocol.parse_client_message(message)["direction"] is Direction.DOWN


def test_encode_client_message_rejects_unknown_types():
    with pytest.raises(ValueError):
        protocol.encode_client_message("chat", text="hi")


class TestParseServerMessage:
    def test_state_frame_is_returned(self):
        payload = protocol.parse_server_message('{"type": "state", "snakes": []}')
        assert payload["snakes"] == []

    @pytest.mark.parametrize("message", ["{", '"state"', '{"type": "move"}'])
    def test_other_frames_raise_value_error(self, message):
        with pytest.raises(ValueError):
            protocol.parse_server_message(message)
