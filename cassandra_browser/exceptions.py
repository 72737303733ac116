#
# Copyright (c) 2026 Juniper Networks, Inc. All rights reserved.
#
# Base class of all exceptions raised by the browser client


class BrowserError(Exception):
    def __init__(self, msg=None):
        self._msg = msg
        super(BrowserError, self).__init__(msg)
    # end __init__

    def __str__(self):
        if self._msg is None:
            return self.__class__.__name__
        return str(self._msg)
    # end __str__
# end class BrowserError


class TransportError(BrowserError):
    def __init__(self, host, port, reason=None):
        self._host = host
        self._port = port
        self._reason = reason
        super(TransportError, self).__init__(reason)
    # end __init__

    def __str__(self):
        return 'Unable to reach %s:%s: %s' % (
            self._host, self._port, self._reason)
    # end __str__
# end class TransportError


class NotConnectedError(TransportError):
    def __init__(self, host, port):
        super(NotConnectedError, self).__init__(
            host, port, 'client is not connected')
    # end __init__
# end class NotConnectedError


class InvalidSchemaError(BrowserError):
    pass
# end class InvalidSchemaError


class SchemaConflictError(BrowserError):
    def __str__(self):
        return 'Schema versions disagree across the cluster%s' % (
            ': %s' % self._msg if self._msg else '')
    # end __str__
# end class SchemaConflictError


class NotFoundError(BrowserError):
    pass
# end class NotFoundError


class UnavailableError(BrowserError):
    def __str__(self):
        return 'Not enough replicas available%s' % (
            ': %s' % self._msg if self._msg else '')
    # end __str__
# end class UnavailableError


class TimedOutError(BrowserError):
    def __str__(self):
        return 'Request timed out%s' % (
            ': %s' % self._msg if self._msg else '')
    # end __str__
# end class TimedOutError


class EncodingError(BrowserError):
    def __init__(self, raw, reason=None):
        self._raw = raw
        super(EncodingError, self).__init__(reason)
    # end __init__

    def __str__(self):
        return 'Cannot decode %r as UTF-8: %s' % (self._raw, self._msg)
    # end __str__
# end class EncodingError


class DriverError(BrowserError):
    pass
# end class DriverError


class ManagementError(BrowserError):
    def __init__(self, mbean, status, reason=None):
        self._mbean = mbean
        self._status = status
        super(ManagementError, self).__init__(reason)
    # end __init__

    @property
    def status(self):
        return self._status

    def __str__(self):
        return 'Management request on %s failed (%s): %s' % (
            self._mbean, self._status, self._msg)
    # end __str__
# end class ManagementError
