"""Field extraction from delimited data and logs: the fcut command."""