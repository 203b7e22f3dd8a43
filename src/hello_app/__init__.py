"""Hello — example pipeweave application.

One route, ``/{owner?}``, runs the ``uppercaseOwner`` pipeline and then
``Hello.hello``::

    GET /        -> Hello, <HelloMessage> WORLD!
    GET /wibble  -> Hello, <HelloMessage> WIBBLE!
"""

__version__ = "0.1.0"
