from pkcs8rsa.lib.asn1.reader import DERReader
from pkcs8rsa.lib.asn1.schema import CLASS_CONTEXT, MalformedEncoding, Tag
from pkcs8rsa.lib.structures import EOF

from .. import TestBase
from ..keys import der_integer, der_sequence, tlv


class TestDERReader(TestBase):

    def test_short_form_element(self):
        reader = DERReader(bytes.fromhex('020101'))
        element = reader.read_element()
        self.assertIs(element.tag, Tag.INTEGER)
        self.assertFalse(element.constructed)
        self.assertEqual(element.length, 1)
        self.assertEqual(element.content, B'\x01')
        self.assertTrue(reader.eof)

    def test_long_form_length(self):
        for size in (0x7F, 0x80, 0xFF, 0x100, 0x1234):
            payload = self.generate_random_buffer(size)
            reader = DERReader(tlv(0x04, payload))
            element = reader.read_element()
            self.assertIs(element.tag, Tag.OCTET_STRING)
            self.assertEqual(element.length, size)
            self.assertEqual(len(element.content), size)
            self.assertEqual(element.content, payload)
            self.assertTrue(reader.eof)

    def test_element_content_is_a_view(self):
        data = bytearray(tlv(0x04, B'pkcs8rsa'))
        element = DERReader(data).read_element()
        self.assertIsInstance(element.content, memoryview)
        self.assertTrue(element.content.readonly)
        data[2] = ord('P')
        self.assertEqual(element.content, B'Pkcs8rsa')

    def test_truncated_header(self):
        for data in (B'', B'\x30', B'\x30\x82\x01'):
            with self.assertRaises(MalformedEncoding, msg=data.hex()):
                DERReader(data).read_element()

    def test_truncated_length_does_not_keep_the_buffer(self):
        data = bytearray(B'\x30\x83\x01\x02')
        with self.assertRaises(MalformedEncoding) as context:
            DERReader(data).read_element()
        cause = context.exception.__cause__
        self.assertIsInstance(cause, EOF)
        self.assertIs(type(cause.rest), bytes)
        self.assertEqual(cause.rest, B'\x01\x02')

    def test_content_exceeds_buffer(self):
        with self.assertRaises(MalformedEncoding):
            DERReader(bytes.fromhex('0405AABBCCDD')).read_element()
        with self.assertRaises(MalformedEncoding):
            DERReader(bytes.fromhex('3084FFFFFFFF00')).read_element()

    def test_indefinite_length_is_rejected(self):
        with self.assertRaises(MalformedEncoding):
            DERReader(bytes.fromhex('3080020100' '0000')).read_element()

    def test_reserved_length_is_rejected(self):
        with self.assertRaises(MalformedEncoding):
            DERReader(bytes.fromhex('04FF00')).read_element()

    def test_enter_sequence(self):
        data = der_sequence(der_integer(0), der_sequence(der_integer(7), der_integer(-1)))
        outer = DERReader(data)
        sequence = outer.enter_sequence()
        self.assertTrue(outer.eof)
        self.assertEqual(sequence.read_small_integer(), 0)
        inner = sequence.enter_sequence()
        self.assertTrue(sequence.eof)
        self.assertEqual(inner.read_small_integer(), 7)
        self.assertEqual(inner.read_small_integer(), -1)
        inner.expect_end()

    def test_enter_shares_the_buffer(self):
        data = bytearray(der_sequence(der_integer(5)))
        reader = DERReader(data).enter_sequence()
        data[-1] = 6
        self.assertEqual(reader.read_small_integer(), 6)

    def test_read_expected_tag_mismatch(self):
        with self.assertRaises(MalformedEncoding):
            DERReader(der_integer(1)).read_expected(Tag.SEQUENCE)
        with self.assertRaises(MalformedEncoding):
            DERReader(der_sequence()).read_expected(Tag.INTEGER)
        with self.assertRaises(MalformedEncoding):
            DERReader(B'').read_expected(Tag.INTEGER)

    def test_read_expected_checks_constructed_bit(self):
        with self.assertRaises(MalformedEncoding):
            DERReader(bytes.fromhex('1000')).read_expected(Tag.SEQUENCE)
        with self.assertRaises(MalformedEncoding):
            DERReader(bytes.fromhex('220101')).read_expected(Tag.INTEGER)

    def test_context_tags_are_not_universal(self):
        element = DERReader(bytes.fromhex('A0030201FF')).read_element()
        self.assertEqual(element.tag_class, CLASS_CONTEXT)
        self.assertEqual(element.tag, 0)
        self.assertNotIsInstance(element.tag, Tag)
        self.assertFalse(element.is_sequence)
        with self.assertRaises(MalformedEncoding):
            DERReader(bytes.fromhex('A2030201FF')).read_expected(Tag.INTEGER)

    def test_high_tag_number(self):
        element = DERReader(bytes.fromhex('9F81000100')).read_element()
        self.assertEqual(element.tag, 0x80)
        self.assertEqual(element.content, B'\0')

    def test_empty_integer_is_rejected(self):
        with self.assertRaises(MalformedEncoding):
            DERReader(bytes.fromhex('0200')).read_integer_bytes()

    def test_read_oid(self):
        self.assertEqual(DERReader(bytes.fromhex('06092A864886F70D010101')).read_oid(), 'rsaEncryption')
        self.assertEqual(DERReader(bytes.fromhex('06072A8648CE3D0201')).read_oid(), 'ecPublicKey')
        self.assertEqual(DERReader(bytes.fromhex('06032B0601')).read_oid(), '1.3.6.1')

    def test_expect_end(self):
        reader = DERReader(der_integer(1) + der_integer(2))
        reader.read_element()
        with self.assertRaises(MalformedEncoding):
            reader.expect_end()
        reader.read_element()
        reader.expect_end()
