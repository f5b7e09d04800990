"""Status-bar runner: blocks run shell commands on timers and signals, and their output is joined into the X root window name."""