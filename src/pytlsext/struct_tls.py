from construct.core import *
from construct.lib import *

""" TLS values shared by the extension structures

These are the values the extensions carry but do not own: protocol
versions, named groups, cipher suites and signature schemes.
All of them are Enum over integers, so that an unassigned code point
is parsed as its integer value instead of raising a MappingError.
"""

## protocol version

ProtocolVersion = Enum( BytesInteger(2),
  ssl_3_0 = 0x0300,
  tls_1_0 = 0x0301,
  tls_1_1 = 0x0302,
  tls_1_2 = 0x0303,
  tls_1_3 = 0x0304,
  dtls_1_0 = 0xfeff,
  dtls_1_2 = 0xfefd,
  dtls_1_3 = 0xfefc,
)

## versions are read until the stream is exhausted. A trailing odd
## byte is left unread.
ProtocolVersionList = GreedyRange( ProtocolVersion )

## supported_group

NamedGroup = Enum( BytesInteger(2),
##  unallocated_RESERVED(0x0000),
##  /* Elliptic Curve Groups (ECDHE) */
  sect163k1 = 0x0001,
  sect163r1 = 0x0002,
  sect163r2 = 0x0003,
  sect193r1 = 0x0004,
  sect193r2 = 0x0005,
  sect233k1 = 0x0006,
  sect233r1 = 0x0007,
  sect239k1 = 0x0008,
  sect283k1 = 0x0009,
  sect283r1 = 0x000a,
  sect409k1 = 0x000b,
  sect409r1 = 0x000c,
  sect571k1 = 0x000d,
  sect571r1 = 0x000e,
  secp160k1 = 0x000f,
  secp160r1 = 0x0010,
  secp160r2 = 0x0011,
  secp192k1 = 0x0012,
  secp192r1 = 0x0013,
  secp224k1 = 0x0014,
  secp224r1 = 0x0015,
  secp256k1 = 0x0016,
  secp256r1 = 0x0017,
  secp384r1 = 0x0018,
  secp521r1 = 0x0019,
  brainpoolP256r1 = 0x001a,
  brainpoolP384r1 = 0x001b,
  brainpoolP512r1 = 0x001c,
  x25519 = 0x001d,
  x448 = 0x001e,
  brainpoolP256r1tls13 = 0x001f,
  brainpoolP384r1tls13 = 0x0020,
  brainpoolP512r1tls13 = 0x0021,
  GC256A = 0x0022,
  GC256B = 0x0023,
  GC256C = 0x0024,
  GC256D = 0x0025,
  GC512A = 0x0026,
  GC512B = 0x0027,
  GC512C = 0x0028,
  curveSM2 = 0x0029,
##  /* Finite Field Groups (DHE) */
  ffdhe2048 = 0x0100,
  ffdhe3072 = 0x0101,
  ffdhe4096 = 0x0102,
  ffdhe6144 = 0x0103,
  ffdhe8192 = 0x0104,
##  /* Hybrid post quantum groups */
  X25519Kyber768Draft00 = 0x6399,
  SecP256r1MLKEM768 = 0x11eb,
  X25519MLKEM768 = 0x11ec,
##  /* Reserved Code Points */
##  ffdhe_private_use(0x01FC..0x01FF),
##  ecdhe_private_use(0xFE00..0xFEFF),
  arbitrary_explicit_prime_curves = 0xff01,
  arbitrary_explicit_char2_curves = 0xff02,
)

NamedGroupList = Struct(
  '_name' / Computed('NamedGroupList'),
  'named_group_list' / Prefixed(BytesInteger(2), GreedyRange(NamedGroup))
)

## cipher suites
## Only the TLS 1.3 suites are named, others are left as integers.

CipherSuite = Enum( BytesInteger(2),
   TLS_AES_128_GCM_SHA256 = 0x1301,
   TLS_AES_256_GCM_SHA384 = 0x1302,
   TLS_CHACHA20_POLY1305_SHA256 = 0x1303,
   TLS_AES_128_CCM_SHA256 = 0x1304,
   TLS_AES_128_CCM_8_SHA256 = 0x1305,
   TLS_EMPTY_RENEGOTIATION_INFO_SCSV = 0x00ff,
   TLS_FALLBACK_SCSV = 0x5600,
)

## signature_algorithm

SignatureScheme = Enum( BytesInteger(2),
  rsa_pkcs1_sha256 = 0x0401,
  rsa_pkcs1_sha384 = 0x0501,
  rsa_pkcs1_sha512 = 0x0601,
  ecdsa_secp256r1_sha256 = 0x0403,
  ecdsa_secp384r1_sha384 = 0x0503,
  ecdsa_secp521r1_sha512 = 0x0603,
  rsa_pss_rsae_sha256 = 0x0804,
  rsa_pss_rsae_sha384 = 0x0805,
  rsa_pss_rsae_sha512 = 0x0806,
  ed25519 = 0x0807,
  ed448 = 0x0808,
  rsa_pss_pss_sha256 = 0x0809,
  rsa_pss_pss_sha384 = 0x080a,
  rsa_pss_pss_sha512 = 0x080b,
  rsa_pkcs1_sha1 = 0x0201,
  ecdsa_sha1 = 0x0203,
)
