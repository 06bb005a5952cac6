import logging

from pytlsext.tls_ext import IncompleteError, VerificationError, \
  decode_extension, decode_extensions, code_of
from pytlsext.conf import Configuration
from pytlsext.debug import Debug

def logger( conf, name ):
  """ returns a logger object

  When conf[ 'log' ] designates a file, the root logger writes into
  that file, otherwise the logging configuration of the application
  is left unchanged.
  """
  logger = logging.getLogger( name )
  FORMAT = "[%(asctime)s : %(filename)s:%(lineno)s - %(funcName)20s() ] %(message)s"
  logger.setLevel( conf.get( 'log_level', 'INFO' ) )
  log_file = conf.get( 'log', None )
  if log_file is not None:
    logging.basicConfig( filename=log_file, format=FORMAT )
  return logger

class ExtensionDecoder:

  def __init__( self, conf:dict=None ):
    """ decodes extensions regions according to a configuration

    Args:
      conf: a partial configuration merged into the template of
        pytlsext.conf.Configuration
    """
    configuration = Configuration()
    if conf is not None:
      configuration.merge( conf )
    configuration.check()
    self.conf = configuration.conf
    self.logger = logger( self.conf, __name__ )
    self.debug = Debug( self.conf[ 'debug' ] )

  def decode( self, data ) -> list :
    """ returns the list of extensions of an extensions region

    Errors are logged and raised to the caller.
    """
    data = bytes( data )
    self.debug.trace_input( data )
    try:
      ext_list = decode_extensions( data )
    except IncompleteError as e:
      self.logger.debug( f"incomplete extensions [{len( data )} bytes]: {e.message}" )
      raise
    except VerificationError as e:
      self.logger.warning( f"{e.status}: {e.message}" )
      raise
    max_ext = self.conf[ 'decoder' ][ 'max_extensions' ]
    if max_ext is not None and len( ext_list ) > max_ext:
      message = f"{len( ext_list )} extensions exceed max_extensions ({max_ext})"
      self.logger.warning( message )
      raise VerificationError( message, status='too_many_extensions' )
    for ext in ext_list:
      self.logger.debug( f"{ext[ 'extension_type' ]} [{ext[ '_length' ]} bytes]" )
      self.debug.trace_extension( ext )
    return ext_list

  def decode_one( self, data ) -> tuple :
    """ decodes the first extension of data, returns ( remaining, ext ) """
    try:
      remaining, ext = decode_extension( data )
    except IncompleteError as e:
      self.logger.debug( f"incomplete extension: {e.message}" )
      raise
    except VerificationError as e:
      self.logger.warning( f"{e.status}: {e.message}" )
      raise
    self.logger.debug( f"{ext[ 'extension_type' ]} [{ext[ '_length' ]} bytes]" )
    self.debug.trace_extension( ext )
    return remaining, ext

  def summary( self, ext_list:list ) -> dict :
    """ returns the extension type codes in wire order with counters

    The codes are those read on the wire, so GREASE extensions keep
    their own value.
    """
    summary = { 'types' : [], 'grease' : 0, 'unknown' : 0 }
    grease_as_unknown = self.conf[ 'decoder' ][ 'grease_as_unknown' ]
    for ext in ext_list:
      summary[ 'types' ].append( code_of( ext[ 'extension_type' ] ) )
      name = ext[ 'extension_data' ][ '_name' ]
      if name == 'Grease' and grease_as_unknown is False:
        summary[ 'grease' ] += 1
      elif name in [ 'Grease', 'Unknown' ]:
        summary[ 'unknown' ] += 1
    return summary
