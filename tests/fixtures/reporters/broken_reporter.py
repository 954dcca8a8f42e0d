raise RuntimeError("reporter module blew up")
