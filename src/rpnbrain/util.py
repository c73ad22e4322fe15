class RPNError(Exception):
    '''
    Bad user input at the front end: unlexable text, unknown commands,
    nothing to store. The machine itself never raises.

    The CLI prints the message and drops the rest of the line.
    '''
    pass
