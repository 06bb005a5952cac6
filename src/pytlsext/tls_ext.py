from construct.core import ConstructError, EnumIntegerString, MappingError

from pytlsext.struct_ext import ExtensionType, ExtensionHeader, Extension, \
  KeyShareClientHello, KeyShareServerHello, KeyShareHelloRetryRequest, \
  OfferedPsks, SelectedIdentity, code_of, is_grease

""" Decoding TLS extensions

The functions of this module are pure, they do not keep any state
between two calls. Decoding has three outcomes:
  - the decoded value and the bytes that follow it,
  - IncompleteError when more bytes are needed,
  - VerificationError when the bytes do not follow the extension grammar.
"""

EXTENSION_HEADER_LEN = 4

class TLSExtError( Exception ):
  def __init__( self, status:str, message:str="" ):
    """ Generic Error class

    Args:
      status (str) : the error designation
      message (str) : is a human readable message
    """
    super().__init__( message )
    self.status = status
    self.message = message

class IncompleteError( TLSExtError ):
  def __init__( self, needed:int, message:str="" ):
    """ More bytes are needed to decode the extension

    Args:
      needed (int): the number of missing bytes
    """
    if message == "":
      message = f"{needed} more byte(s) needed"
    super().__init__( 'incomplete', message )
    self.needed = needed

class VerificationError( TLSExtError ):
  def __init__( self, message:str, status:str='verification_error' ):
    """ The bytes violate the grammar of the extension """
    super().__init__( status, message )

class ConfigurationError( TLSExtError ):
  def __init__( self, message:str ):
    """ Error that are related to the configuration """
    super().__init__( 'configuration_error', message )


## Type registry

def to_symbol( code:int ):
  """ returns the registered name of the extension type

  Unregistered codes are returned unchanged.
  """
  return ExtensionType.parse( code.to_bytes( 2, byteorder='big' ) )

def to_numeral( symbol ) -> int:
  """ returns the extension type code of a name, an Enum value or a code """
  if isinstance( symbol, ( int, EnumIntegerString ) ):
    code = code_of( symbol )
    if code < 0 or code > 0xffff:
      raise TLSExtError( 'unknown_extension_type',
        f"{symbol} is not a 16 bits extension type" )
    return code
  try:
    return int.from_bytes( ExtensionType.build( symbol ), byteorder='big' )
  except MappingError:
    raise TLSExtError( 'unknown_extension_type', f"{symbol}" )

## the variant designated by _name determines the extension type.
## Grease and Unknown are handled by extension_type_of
VARIANT_EXTENSION_TYPE = {
  'ServerNameList' : 'server_name',
  'MaxFragmentLength' : 'max_fragment_length',
  'StatusRequest' : 'status_request',
  'NamedGroupList' : 'supported_groups',
  'ECPointFormatList' : 'ec_point_formats',
  'SignatureSchemeList' : 'signature_algorithms',
  'Heartbeat' : 'heartbeat',
  'ProtocolNameList' : 'application_layer_protocol_negotiation',
  'SignedCertificateTimestamp' : 'signed_certificate_timestamp',
  'Padding' : 'padding',
  'EncryptThenMac' : 'encrypt_then_mac',
  'ExtendedMasterSecret' : 'extended_master_secret',
  'RecordSizeLimit' : 'record_size_limit',
  'SessionTicket' : 'session_ticket',
  'KeyShareOld' : 'key_share_old',
  'KeyShare' : 'key_share',
  'PreSharedKey' : 'pre_shared_key',
  'EarlyDataIndication' : 'early_data',
  'SelectedVersion' : 'supported_versions',
  'VersionList' : 'supported_versions',
  'Cookie' : 'cookie',
  'PskKeyExchangeModes' : 'psk_key_exchange_modes',
  'OIDFilterExtension' : 'oid_filters',
  'PostHandshakeAuth' : 'post_handshake_auth',
  'NextProtocolNegotiation' : 'next_protocol_negotiation',
  'RenegotiationInfo' : 'renegotiation_info',
  'EncryptedServerName' : 'encrypted_server_name',
  'Grease' : 'grease',
}

def extension_type_of( ext ) -> int:
  """ returns the extension type code of a decoded extension

  Args:
    ext: the decoded extension or its extension_data

  Returns:
    the extension type code. All GREASE values return the code of
    'grease' (0xfafa), the grease_value remains in the extension_data.
  """
  data = ext.get( 'extension_data', ext )
  name = data[ '_name' ]
  if name == 'Unknown':
    try:
      return code_of( ext[ 'extension_type' ] )
    except KeyError:
      raise TLSExtError( 'unknown_extension_type',
        "Unknown extension_data does not carry its extension type" )
  return to_numeral( VARIANT_EXTENSION_TYPE[ name ] )


## Envelope and sequence parser

def decode_extension( data ) -> tuple:
  """ decodes the extension at the start of data

  Args:
    data: bytes starting at an extension boundary

  Returns:
    ( remaining, ext ) with remaining the bytes following the extension
    and ext the decoded extension.

  Raises:
    IncompleteError: when data does not contain the full extension
    VerificationError: when the extension_data does not match the
      grammar of the extension type.
  """
  data = bytes( data )
  if len( data ) < EXTENSION_HEADER_LEN:
    raise IncompleteError( EXTENSION_HEADER_LEN - len( data ) )
  header = ExtensionHeader.parse( data[ : EXTENSION_HEADER_LEN ] )
  end = EXTENSION_HEADER_LEN + header[ 'length' ]
  if len( data ) < end:
    raise IncompleteError( end - len( data ) )
  ## the envelope is complete so any error is located in the
  ## extension_data and more bytes will not fix it.
  try:
    ext = Extension.parse( data[ : end ] )
  except ConstructError as e:
    raise VerificationError( f"invalid {header[ 'extension_type' ]} "\
      f"extension [{header[ 'length' ]} bytes]: {e}" ) from e
  return data[ end : ], ext

def decode_extension_of_type( data, extension_type ) -> tuple:
  """ decodes an extension that is expected to be of extension_type

  Args:
    data: bytes starting at an extension boundary
    extension_type: the expected type as a name or a code

  Returns:
    ( remaining, ext ) as decode_extension
  """
  expected = to_numeral( extension_type )
  if len( data ) >= 2:
    code = int.from_bytes( bytes( data[ : 2 ] ), byteorder='big' )
    if code != expected:
      raise VerificationError(
        f"expecting {to_symbol( expected )} got {to_symbol( code )}",
        status='unexpected_extension_type' )
  return decode_extension( data )

def decode_extensions( data ) -> list:
  """ decodes the extensions region of a handshake message

  The region is the data of the extensions field, that is without
  the 2 bytes length. Extensions are returned in the wire order.
  Any error aborts the decoding of the whole region.
  """
  data = bytes( data )
  ext_list = []
  while len( data ) > 0 :
    data, ext = decode_extension( data )
    ext_list.append( ext )
  return ext_list


## Interpretation of the extension_data once the handshake message is
## known. The extension_data is complete, so errors are
## VerificationError.

def extension_bytes( ext, key:str ) -> bytes:
  """ returns the raw bytes designated by key in a decoded extension

  ext can also be the raw bytes themselves.
  """
  if isinstance( ext, ( bytes, bytearray, memoryview ) ):
    return bytes( ext )
  data = ext.get( 'extension_data', ext )
  return data[ key ]

def _parse( struct, data:bytes, description:str ):
  try:
    return struct.parse( data )
  except ConstructError as e:
    raise VerificationError( f"invalid {description}: {e}" ) from e

def decode_key_share( ext, msg_type:str ):
  """ interprets the key_share extension_data

  Args:
    ext: a decoded key_share (or key_share_old) extension or its raw bytes
    msg_type: 'client_hello', 'server_hello' or 'hello_retry_request'
  """
  struct_dict = { 'client_hello' : KeyShareClientHello,
                  'server_hello' : KeyShareServerHello,
                  'hello_retry_request' : KeyShareHelloRetryRequest }
  try:
    struct = struct_dict[ msg_type ]
  except KeyError:
    raise TLSExtError( 'unexpected_message_type', f"{msg_type}" )
  return _parse( struct, extension_bytes( ext, 'key_share' ),
                 f"key_share in {msg_type}" )

def decode_pre_shared_key( ext, msg_type:str ):
  """ interprets the pre_shared_key extension_data

  Args:
    ext: a decoded pre_shared_key extension or its raw bytes
    msg_type: 'client_hello' or 'server_hello'
  """
  struct_dict = { 'client_hello' : OfferedPsks,
                  'server_hello' : SelectedIdentity }
  try:
    struct = struct_dict[ msg_type ]
  except KeyError:
    raise TLSExtError( 'unexpected_message_type', f"{msg_type}" )
  return _parse( struct, extension_bytes( ext, 'pre_shared_key' ),
                 f"pre_shared_key in {msg_type}" )

def selected_version( ext ):
  """ returns the version selected by the server or None

  Only the two bytes form of supported_versions designates a
  selected version.
  """
  data = ext.get( 'extension_data', ext )
  if data[ '_name' ] == 'SelectedVersion':
    return data[ 'versions' ][ 0 ]
  return None
