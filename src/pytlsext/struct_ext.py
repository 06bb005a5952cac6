from construct.core import *
from construct.lib import *

from pytlsext.struct_tls import ProtocolVersion, ProtocolVersionList, \
  NamedGroup, NamedGroupList, CipherSuite, SignatureScheme

""" TLS extension structures

TLS extensions are defined in:

  - RFC4492, RFC8422 (supported_groups, ec_point_formats)
  - RFC6066 (server_name, max_fragment_length, status_request)
  - RFC6520 (heartbeat)
  - RFC7301 (application_layer_protocol_negotiation)
  - RFC7366 (encrypt_then_mac)
  - RFC7627 (extended_master_secret)
  - RFC7685 (padding)
  - RFC8446 (TLS 1.3 extensions)
  - RFC8449 (record_size_limit)
  - draft-ietf-tls-esni (encrypted_server_name)

The content structures are parsed from the extension_data only, that is
the stream they receive is bounded by the extension length. Structures
that need the declared length read it from the Extension context as
this._._length. When a structure is parsed on its own, the length can be
provided as a context argument, i.e. StatusRequest.parse( data, _length=5 ).
"""

## Extension structure

## https://www.iana.org/assignments/tls-extensiontype-values/tls-extensiontype-values.xhtml#tls-extensiontype-values-1
ExtensionType = Enum( BytesInteger(2),
  server_name = 0x0000,
  max_fragment_length = 0x0001,
  client_certificate_url = 0x0002,
  trusted_ca_keys = 0x0003,
  truncated_hmac = 0x0004,
  status_request = 0x0005,
  user_mapping = 0x0006,
  client_authz = 0x0007,
  server_authz = 0x0008,
  cert_type = 0x0009,
  supported_groups = 0x000a,
  ec_point_formats = 0x000b,
  srp = 0x000c,
  signature_algorithms = 0x000d,
  use_srtp = 0x000e,
  heartbeat = 0x000f,
  application_layer_protocol_negotiation = 0x0010,
  status_request_v2 = 0x0011,
  signed_certificate_timestamp = 0x0012,
  client_certificate_type = 0x0013,
  server_certificate_type = 0x0014,
  padding = 0x0015,
  encrypt_then_mac = 0x0016,
  extended_master_secret = 0x0017,
  token_binding = 0x0018,
  cached_info = 0x0019,
  compress_certificate = 0x001b,
  record_size_limit = 0x001c,
  session_ticket = 0x0023,
  key_share_old = 0x0028, ## moved to 51 in TLS 1.3 draft 23
  pre_shared_key = 0x0029,
  early_data = 0x002a,
  supported_versions = 0x002b,
  cookie = 0x002c,
  psk_key_exchange_modes = 0x002d,
  ticket_early_data_info = 0x002e, ## TLS 1.3 draft 18, removed in draft 19
  certificate_authorities = 0x002f,
  oid_filters = 0x0030,
  post_handshake_auth = 0x0031,
  signature_algorithms_cert = 0x0032,
  key_share = 0x0033,
  next_protocol_negotiation = 0x3374,
  grease = 0xfafa,
  renegotiation_info = 0xff01,
  encrypted_server_name = 0xffce,
)

GREASE_MASK = 0x0f0f
GREASE_PATTERN = 0x0a0a

def code_of( value ) -> int:
  """ returns the integer carried by an Enum value

  Parsing an Enum returns a string for known values and an integer
  otherwise. The string keeps the integer in its intvalue attribute.
  """
  if isinstance( value, EnumIntegerString ):
    return value.intvalue
  return int( value )

def is_grease( value ) -> bool:
  """ tells whether the code matches the GREASE pattern ( RFC8701 ) """
  return code_of( value ) & GREASE_MASK == GREASE_PATTERN

def extension_key( ctx ):
  """ selects the content structure of an extension

  GREASE values are checked before the registry as 0xfafa is both a
  registered name and a GREASE value, and any future registration may
  collide with the pattern.
  """
  if is_grease( ctx.extension_type ):
    return 'grease'
  return ctx.extension_type

def Empty( name:str ):
  """ extension with no payload, the declared length MUST be 0 """
  return Struct(
    '_name' / Computed( name ),
    Check( this._._length == 0 )
  )

## server_name

NameType = Enum( BytesInteger(1),
  host_name = 0
)

ServerName = Struct(
  'name_type' / NameType,
  'name' / Prefixed( BytesInteger(2), GreedyBytes )
)

## the list is bounded by its own length, bytes following the list
## in the extension_data are not part of it.
ServerNameList = Struct(
  '_name' / Computed('ServerNameList'),
  'server_name_list' / Prefixed( BytesInteger(2), GreedyRange( ServerName ) )
)

## max_fragment_length

MaxFragmentLengthValue = Enum( BytesInteger(1),
  two_pow_9 = 1,
  two_pow_10 = 2,
  two_pow_11 = 3,
  two_pow_12 = 4
)

MaxFragmentLength = Struct(
  '_name' / Computed('MaxFragmentLength'),
  Check( this._._length == 1 ),
  'max_fragment_length' / MaxFragmentLengthValue
)

## status_request

CertificateStatusType = Enum( BytesInteger(1),
  ocsp = 1,
  ocsp_multi = 2
)

CertificateStatusRequest = Struct(
  'status_type' / CertificateStatusType,
  'request' / Bytes( this._._._length - 1 )
)

## an empty extension_data is the ServerHello acknowledgment
StatusRequest = Struct(
  '_name' / Computed('StatusRequest'),
  'status' / If( this._._length > 0, CertificateStatusRequest )
)

## ec_point_formats
## the formats are left as raw bytes

ECPointFormatList = Struct(
  '_name' / Computed('ECPointFormatList'),
  'ec_point_format_list' / Prefixed( BytesInteger(1), GreedyBytes )
)

## signature_algorithms

SignatureSchemeList = Struct(
  '_name' / Computed('SignatureSchemeList'),
  'supported_signature_algorithms' / Prefixed(BytesInteger(2),\
                                       GreedyRange(SignatureScheme))
)

## heartbeat

HeartbeatMode = Enum( BytesInteger(1),
  peer_allowed_to_send = 1,
  peer_not_allowed_to_send = 2
)

Heartbeat = Struct(
  '_name' / Computed('Heartbeat'),
  Check( this._._length == 1 ),
  'mode' / HeartbeatMode
)

## application_layer_protocol_negotiation

ProtocolName = Prefixed( BytesInteger(1), GreedyBytes )

ProtocolNameList = Struct(
  '_name' / Computed('ProtocolNameList'),
  'protocol_name_list' / Prefixed( BytesInteger(2), GreedyRange( ProtocolName ) )
)

## signed_certificate_timestamp
## empty in the ClientHello

SignedCertificateTimestamp = Struct(
  '_name' / Computed('SignedCertificateTimestamp'),
  'signed_certificate_timestamp' / Optional( Prefixed( BytesInteger(2), GreedyBytes ) )
)

## padding

Padding = Struct(
  '_name' / Computed('Padding'),
  'padding' / GreedyBytes
)

## encrypt_then_mac, extended_master_secret, post_handshake_auth and
## next_protocol_negotiation only indicate their presence.

EncryptThenMac = Empty( 'EncryptThenMac' )
ExtendedMasterSecret = Empty( 'ExtendedMasterSecret' )
PostHandshakeAuth = Empty( 'PostHandshakeAuth' )
## draft-agl-tls-nextprotoneg-03. Deprecated in favour of ALPN.
NextProtocolNegotiation = Empty( 'NextProtocolNegotiation' )

## record_size_limit

RecordSizeLimit = Struct(
  '_name' / Computed('RecordSizeLimit'),
  'record_size_limit' / BytesInteger(2)
)

## session_ticket, key_share, pre_shared_key, cookie
## The content of these extensions depends on the handshake message
## and is returned as raw bytes. See tls_ext for helpers
## that interpret them once the message type is known.

SessionTicket = Struct(
  '_name' / Computed('SessionTicket'),
  'ticket' / GreedyBytes
)

KeyShareOld = Struct(
  '_name' / Computed('KeyShareOld'),
  'key_share' / GreedyBytes
)

KeyShare = Struct(
  '_name' / Computed('KeyShare'),
  'key_share' / GreedyBytes
)

PreSharedKey = Struct(
  '_name' / Computed('PreSharedKey'),
  'pre_shared_key' / GreedyBytes
)

Cookie = Struct(
  '_name' / Computed('Cookie'),
  'cookie' / GreedyBytes
)

## early_data
## empty in ClientHello and EncryptedExtensions, carries the
## max_early_data_size in NewSessionTicket.

EarlyDataIndication = Struct(
  '_name' / Computed('EarlyDataIndication'),
  'max_early_data_size' / If( this._._length > 0, BytesInteger(4) )
)

## supported_versions
##
##struct {
##          select (Handshake.msg_type) {
##              case client_hello:
##                   ProtocolVersion versions<2..254>;
##
##              case server_hello: /* and HelloRetryRequest */
##                   ProtocolVersion selected_version;
##          };
##      } SupportedVersions
##
## The message type is not known at this level, so the variant is
## deduced from the declared length: the client_hello form has length
## 1 + 2 * n while the server_hello form has length 2.
## The length byte of the client_hello form is read but not used, the
## versions are read until the end of the extension_data.

SelectedVersion = Struct(
  '_name' / Computed('SelectedVersion'),
  'versions' / Array( 1, ProtocolVersion )
)

VersionList = Struct(
  '_name' / Computed('VersionList'),
  Check( this._._length > 0 ),
  '_versions_length' / BytesInteger(1),
  'versions' / ProtocolVersionList
)

SupportedVersions = IfThenElse( this._length == 2, SelectedVersion, VersionList )

## psk_key_exchange_modes

PskKeyExchangeMode = Enum(BytesInteger(1),
  psk_ke = 0,
  psk_dhe_ke = 1,
)

PskKeyExchangeModes = Struct(
  '_name' / Computed('PskKeyExchangeModes'),
  'ke_modes' / Prefixed(BytesInteger(1), GreedyRange(PskKeyExchangeMode))
)

## oid_filters

OIDFilter = Struct(
  'certificate_extension_oid' / Prefixed( BytesInteger(1), GreedyBytes ),
  'certificate_extension_values' / Prefixed( BytesInteger(2), GreedyBytes )
)

OIDFilterExtension = Struct(
  '_name' / Computed('OIDFilterExtension'),
  'filters' / Prefixed( BytesInteger(2), GreedyRange( OIDFilter ) )
)

## renegotiation_info ( RFC5746 )

RenegotiationInfo = Struct(
  '_name' / Computed('RenegotiationInfo'),
  'renegotiated_connection' / Prefixed( BytesInteger(1), GreedyBytes )
)

## encrypted_server_name ( draft-ietf-tls-esni )

EncryptedServerName = Struct(
  '_name' / Computed('EncryptedServerName'),
  'cipher_suite' / CipherSuite,
  'group' / NamedGroup,
  'key_share' / Prefixed( BytesInteger(2), GreedyBytes ),
  'record_digest' / Prefixed( BytesInteger(2), GreedyBytes ),
  'encrypted_sni' / Prefixed( BytesInteger(2), GreedyBytes )
)

## GREASE and unknown extensions carry raw bytes.

Grease = Struct(
  '_name' / Computed('Grease'),
  'grease_value' / Computed( lambda ctx: code_of( ctx._.extension_type ) ),
  'data' / GreedyBytes
)

Unknown = Struct(
  '_name' / Computed('Unknown'),
  'data' / GreedyBytes
)

## The extension_data is bounded by the declared length so a content
## structure never reads past the extension. Registered types without
## a structure listed here, as well as unassigned types, are parsed
## as Unknown.

EXTENSION_DATA = {
  'server_name' : ServerNameList,
  'max_fragment_length' : MaxFragmentLength,
  'status_request' : StatusRequest,
  'supported_groups' : NamedGroupList,
  'ec_point_formats' : ECPointFormatList,
  'signature_algorithms' : SignatureSchemeList,
  'heartbeat' : Heartbeat,
  'application_layer_protocol_negotiation' : ProtocolNameList,
  'signed_certificate_timestamp' : SignedCertificateTimestamp,
  'padding' : Padding,
  'encrypt_then_mac' : EncryptThenMac,
  'extended_master_secret' : ExtendedMasterSecret,
  'record_size_limit' : RecordSizeLimit,
  'session_ticket' : SessionTicket,
  'key_share_old' : KeyShareOld,
  'pre_shared_key' : PreSharedKey,
  'early_data' : EarlyDataIndication,
  'supported_versions' : SupportedVersions,
  'cookie' : Cookie,
  'psk_key_exchange_modes' : PskKeyExchangeModes,
  'oid_filters' : OIDFilterExtension,
  'post_handshake_auth' : PostHandshakeAuth,
  'key_share' : KeyShare,
  'next_protocol_negotiation' : NextProtocolNegotiation,
  'renegotiation_info' : RenegotiationInfo,
  'encrypted_server_name' : EncryptedServerName,
  'grease' : Grease,
}

## extension_type and length, used to check the envelope is
## complete before the extension_data is parsed.
ExtensionHeader = Struct(
  'extension_type' / ExtensionType,
  'length' / BytesInteger(2)
)

Extension = Struct(
  '_name' / Computed('Extension'),
  'extension_type' / ExtensionType,
  '_length' / BytesInteger(2),
  'extension_data' / FixedSized( this._length,
                       Switch( extension_key, EXTENSION_DATA, default=Unknown ) )
)

## Structures to interpret raw extension_data once the handshake
## message is known.

## Key Share

KeyShareEntry = Struct(
 '_name' / Computed('KeyShareEntry'),
  'group' / NamedGroup,
  'key_exchange' / Prefixed( BytesInteger(2), GreedyBytes )
)

KeyShareClientHello = Struct(
 '_name' / Computed('KeyShareClientHello'),
 'client_shares' / Prefixed(BytesInteger(2), GreedyRange(KeyShareEntry))
)

KeyShareHelloRetryRequest = Struct(
 '_name' / Computed('KeyShareHelloRetryRequest'),
  'selected_group' / NamedGroup
)

KeyShareServerHello = Struct(
 '_name' / Computed('KeyShareServerHello'),
  'server_share' / KeyShareEntry
)

## pre_shared_key

PskIdentity = Struct(
  'identity' / Prefixed( BytesInteger(2), GreedyBytes),
  'obfuscated_ticket_age' / BytesInteger(4)
)

PskBinderEntry = Struct(
  'binder' / Prefixed(BytesInteger(1), GreedyBytes)
)

OfferedPsks = Struct(
  '_name' / Computed('OfferedPsks'),
  'identities' / Prefixed(BytesInteger(2), GreedyRange(PskIdentity)),
  'binders' / Prefixed(BytesInteger(2), GreedyRange(PskBinderEntry))
)

SelectedIdentity = Struct(
  '_name' / Computed('SelectedIdentity'),
  'selected_identity' / BytesInteger(2)
)
