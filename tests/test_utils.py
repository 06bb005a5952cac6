from construct.core import *
from construct.lib import *

from pytlsext.tls_ext import decode_extension, extension_type_of

def title(title):
    """ print title in a square box

    To enhance the readability of the tests, this function prints in the
    terminal the string title in a square box.

    Args:
        title (str): the string
    """
    space = "    "
    title = space + title + space
    h_line = '+'
    for character in title:
        h_line += '-'
    h_line += '+\n'
    print('\n' + h_line + '|' + title + '|\n' + h_line )


def compare( data_struct1, data_struct2):
  """ compares two data structures """
  if isinstance( data_struct1, (dict, Container) ) and\
     isinstance( data_struct2, (dict, Container) ) :
    ## removing unsignificant variable for container, i.e. used for the
    ## purpose of data processing
    data_keys = []
    for data_struct in [ data_struct1, data_struct2]:
      keys = list(data_struct.keys())
      if isinstance(data_struct, Container):
        for k in keys[:]:
          if k[0] == '_':
            keys.remove(k)
      data_keys.append(set(keys))
    ## comparing keys
    if not data_keys[0] == data_keys[1]:
      k1 = data_keys[0]
      k2 = data_keys[1]
      raise Exception(\
        "\n    - k1: %s"%k1 + "\n    - k2: %s"%k2 +\
        "\n    - keys in k1 not in k2: %s"%k1.difference(k2) +\
        "\n    - keys in k2 not in k1 :%s"%k2.difference(k1) +\
        "\n    - data_struct1: %s"%data_struct1 +\
        "\n    - data_struct2: %s"%data_struct2 )
    for k in data_keys[1] :
      compare(data_struct1[k], data_struct2[k])
  elif isinstance( data_struct1, (list, ListContainer)) and\
     isinstance( data_struct2, (list, ListContainer)) :
    if len(data_struct1) == len(data_struct2):
      for i in range(len(data_struct1)):
         compare(data_struct1[i], data_struct2[i])
    else:
      raise Exception( f"length do not match" \
        f"\n    - data_struct1 [len: {len(data_struct1)}]: {data_struct1}"\
        f"\n    - data_struct2 [len: {len(data_struct2)}]: {data_struct2}" )
  elif isinstance( data_struct1, (str, EnumIntegerString)) and\
     isinstance( data_struct2, (str, EnumIntegerString)) :
    if str(data_struct1) != str(data_struct2):
      raise Exception( \
        "\n    - data_struct1 [%s] : %s"%(type(data_struct1), data_struct1) +\
        "\n    - data_struct2 [%s] : %s"%(type(data_struct2), data_struct2) )
  else:
    if data_struct1 != data_struct2:
      raise Exception( \
        "\n    - data_struct1 [%s] : %s"%(type(data_struct1), data_struct1) +\
        "\n    - data_struct2 [%s] : %s"%(type(data_struct2), data_struct2) )


def envelope( extension_type:int, body:bytes ) -> bytes:
  """ returns the extension_type, length, body bytes """
  return extension_type.to_bytes( 2, byteorder='big' ) +\
         len( body ).to_bytes( 2, byteorder='big' ) + body


def check_extension( extension_type:int, body:bytes, extension_data:dict ):
  """ decodes a single extension and compares its extension_data

  Args:
    extension_type: the type code placed in the envelope
    body: the extension_data bytes
    extension_data: the expected decoded extension_data without the
      '_' keys.

  Returns:
    the decoded extension
  """
  remaining, ext = decode_extension( envelope( extension_type, body ) )
  title( f"{ext[ 'extension_type' ]} [{len( body )} bytes]" )
  print( f"struct: {ext}" )
  assert remaining == b''
  assert extension_type_of( ext ) == extension_type
  compare( extension_data, ext[ 'extension_data' ] )
  return ext


def check_struct( struct, data:bytes, expected:dict, **ctx ):
  """ parses data with struct, compares and builds it back

  Args:
    struct: the construct structure
    data: the bytes to parse
    expected: the expected parsed value without the '_' keys.
    ctx: context values, i.e. the _length of the extension

  Returns:
    the parsed value
  """
  title( f"{type( struct ).__name__} [{len( data )} bytes]" )
  parsed = struct.parse( data, **ctx )
  print( f"struct: {parsed}" )
  compare( expected, parsed )
  assert struct.build( parsed, **ctx ) == data
  return parsed


def str_to_bytes( hex_str:str ) -> bytes:
  """ converts '00 0a 00 04' into bytes """
  return bytes.fromhex( hex_str )
