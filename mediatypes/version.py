VERSION = "0.3.0"
MEDIATYPES = "mediatypes " + VERSION


if __name__ == "__main__":  # pragma: no cover
    print(VERSION)
