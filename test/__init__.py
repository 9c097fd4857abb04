import logging
import random
import unittest

import pkcs8rsa


__all__ = ['pkcs8rsa', 'TestBase']


class TestBase(unittest.TestCase):

    def generate_random_buffer(self, size):
        return bytes(random.randrange(0, 0x100) for _ in range(size))

    def setUp(self):
        random.seed(0xBAADF00D)  # guarantee deterministic 'random' buffers
        logging.disable(logging.CRITICAL)
