import binascii
import pprint

from pytlsext.tls_ext import ConfigurationError, code_of


def bytes_to_str( bit_string ):
  """ converts bytes to string

  Args:
    bit_string: the bytes stream

  Returns:
    the string representing the bytes
  """
  return binascii.hexlify( bit_string, sep=' ' ).decode()

def bytes_to_human( description:str, bit_string:bytes ):
  """ display bytes stream into a human readable format

  Args:
    description: a string that describes the coming bytes
    bit_string: the byte stream to display

  Returns:
    a string
  """

  output_string = f"  - {description} [{len(bit_string)} bytes]:\n"
  sep=0
  for char in bytes_to_str( bit_string ):
    if char == ' ':
      sep += 1
      if sep % 16 == 0:
        output_string += '\n'
      else:
        output_string += char
    else:
      output_string += char
  return output_string

def print_bin( description:str, bit_string:bytes ):
  """ prints human readable bytes to the stdout """
  print( bytes_to_human( description, bit_string ) )

def print_val( key:str, value ):
  """ pretty print values """
  if isinstance( value , ( bytes, bytearray ) ):
    print_bin( key, value )
  else:
    pprint.pprint( f"  - {key}: {value}", width=80, sort_dicts=False )

class Debug:

  def __init__( self, debug_conf:dict ):
    self.conf = debug_conf
    self.trace = False
    if 'trace' in debug_conf.keys( ):
      self.trace = debug_conf[ 'trace' ]
      if isinstance( self.trace, bool ) is False:
        raise ConfigurationError( f"Unexpected value for trace."\
          f" Expecting boolean value. {debug_conf}" )

  def trace_input( self, data:bytes ):
    if self.trace is True:
      print_bin( 'extensions', data )

  def trace_extension( self, ext ):
    """ prints the extension type and the decoded extension_data """
    if self.trace is True:
      ## the wire code, GREASE values included
      code = code_of( ext[ 'extension_type' ] )
      print_val( f"{ext[ 'extension_type' ]} [0x{code:04x}]", ext[ 'extension_data' ] )
