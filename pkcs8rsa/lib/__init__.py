"""
Library code of the PKCS#8 RSA key decoder.
"""
