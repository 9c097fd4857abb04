"""
A minimal reader for the Distinguished Encoding Rules (DER) of ASN.1.
"""
