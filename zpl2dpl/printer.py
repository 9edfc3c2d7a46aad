#!/usr/bin/env python

import socket
import logging

log = logging.getLogger(__name__)

# DPL jobs carry control characters (<STX>) that have to reach the printer
# as single bytes
ENCODING = 'latin-1'


class Printer:
    '''
    This Printer class delivers DPL jobs; the base class prints them.
    '''

    def send_job(self, dpl):
        print(dpl)

    def close(self):
        pass


class TCPPrinter(Printer):
    '''
    This class allows to send DPL jobs to a Datamax printer via a raw TCP port.
    '''
    def __init__(self, host, port=9100, socket_timeout=5):
        try:
            log.debug('Socket create: {}:{}'.format(host, port))
            self.socket = socket.create_connection((host, port), timeout=socket_timeout)
        except socket.timeout:
            log.error('Socket create timeout')
            raise
        except OSError as e:
            log.exception('Socket create exception: {}'.format(e))
            raise
        finally:
            log.debug('Socket create finished')

    def send_job(self, dpl):
        try:
            log.debug('Send: {!r}'.format(dpl[:80]))
            self.socket.sendall(dpl.encode(ENCODING))
        except socket.timeout:
            log.error('Send timeout')
            raise
        except OSError:
            log.exception('Send failed')
            raise
        finally:
            log.debug('Send finished')

    def close(self):
        self.socket.close()


class FilePrinter(Printer):
    def __init__(self, filename, mode='w'):
        assert mode in 'wa', "only write 'w' or append 'a' is supported as mode"
        # newline='' keeps the <CR> record separators untouched
        self.file = open(filename, mode, encoding=ENCODING, newline='')

    def send_job(self, dpl):
        self.file.write(dpl)

    def close(self):
        self.file.close()
