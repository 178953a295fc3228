"""File finding with name, type, size and time filters: the ffind command."""