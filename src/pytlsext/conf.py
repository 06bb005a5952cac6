from pytlsext.tls_ext import ConfigurationError

LOG_LEVELS = [ 'CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG', 'NOTSET' ]

class Configuration:
  """manipulates the decoder configuration

    The configuration is a dictionary initialized from a template.
    Users are expected to only provide the parameters they want to
    change, which are merged into the template with merge.

    Attributes:
      conf: a dictionary with all configuration parameters
  """

  def __init__( self ):
    """ initializes self.conf

    Note that we define the configuration inside the calls to
    ensure the scope of the template only remains within the class.
    """
    self.conf = {
      'description' : "TLS extensions decoder configuration template",
      ## log: the file logs are written to. When set to None,
      ##   messages are handled by the logging configuration of the
      ##   application.
      ## log_level: one of the logging level names
      'log' : None,
      'log_level' : 'INFO',
      ## prints every decoded extension with the input bytes
      ##   trace (bool) : indicates to print the information
      'debug' : {
        'trace' : False,
      },
      'decoder' : {
        ## GREASE extensions are always decoded as Grease, this
        ## only affects how they are counted by summary
        'grease_as_unknown' : False,
        ## maximum number of extensions accepted in a single region,
        ## None means no limit.
        'max_extensions' : None,
      },
    }

  def merge( self, branch:dict, master:dict=None ):
    """ merge the branch conf to the master conf

    The branch configuration is expected to provide a subset of the parameters
    Those not provided are taken from the template.

    Args:
      branch: the dictionary containing the configuration
        parameters to be integrated
      master: the dictionary to which the branch is merged.
    """

    if master is None :
      master = self.conf
    for key in branch.keys():
      value_is_dict = isinstance( branch[ key ], dict )
      if value_is_dict is False or key not in master.keys() :
        master[ key ] = branch[ key ]
      else:
        master[ key ] = self.merge( branch[ key ], master[ key] )
    return master

  def set_log_level( self, level:str ):
    """ sets the logging level

    Args:
      level: a logging level name, i.e. 'DEBUG', 'INFO', 'WARNING'...
    """
    if isinstance( level, str ) is False or\
       level.upper() not in LOG_LEVELS:
      raise ConfigurationError( f"unknown log_level {level}." )
    self.conf[ 'log_level' ] = level.upper()

  def check( self ):
    """ checks the configuration parameters """
    for key in [ 'log', 'log_level', 'debug', 'decoder' ]:
      if key not in self.conf.keys():
        raise ConfigurationError( f"missing {key} in {self.conf}" )
    if self.conf[ 'log' ] is not None and\
       isinstance( self.conf[ 'log' ], str ) is False:
      raise ConfigurationError( f"Unexpected value for log "\
        f"{self.conf[ 'log' ]}. Expecting a file path or None" )
    self.set_log_level( self.conf[ 'log_level' ] )

    decoder_conf = self.conf[ 'decoder' ]
    if isinstance( decoder_conf.get( 'grease_as_unknown', False ), bool ) is False:
      raise ConfigurationError( f"Unexpected value for grease_as_unknown."\
        f" Expecting boolean value. {decoder_conf}" )
    max_ext = decoder_conf.get( 'max_extensions', None )
    if max_ext is not None:
      if isinstance( max_ext, bool ) or isinstance( max_ext, int ) is False or\
         max_ext < 0:
        raise ConfigurationError( f"Unexpected value for max_extensions."\
          f" Expecting a positive integer or None. {decoder_conf}" )
