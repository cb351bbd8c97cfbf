import json
import random

import pytest

from audiopong.game import Game
from main import create_app


class FakeSocket:
    """Stand-in for a websocket: records sent frames"""

    def __init__(self, closed=False, fail=False):
        self.closed = closed
        self.fail = fail
        self.sent = []

    async def send_str(self, text):
        if self.fail:
            raise ConnectionResetError("Cannot write to closing transport")
        self.sent.append(text)

    def messages(self):
        return [json.loads(text) for text in self.sent]


@pytest.fixture()
def game():
    return Game(rng=random.Random(1234))


@pytest.fixture()
def make_socket():
    return FakeSocket


@pytest.fixture()
async def client(aiohttp_client, game):
    # No background tick loop: tests drive game.tick() themselves
    return await aiohttp_client(create_app(game, run_loop=False))
