from landlord.errors import EvictionError, LandlordError, ResponseReadError, describe


def test_describe_walks_causes():
    try:
        try:
            try:
                raise TimeoutError()
            except TimeoutError as e:
                raise ResponseReadError("could not read body") from e
        except ResponseReadError as e:
            raise EvictionError("error evicting aks-spot-1") from e
    except EvictionError as e:
        err = e

    assert describe(err) == "error evicting aks-spot-1: could not read body: TimeoutError"


def test_describe_single_error():
    assert describe(LandlordError("boom")) == "boom"


def test_hierarchy():
    assert issubclass(ResponseReadError, EvictionError)
    assert issubclass(EvictionError, LandlordError)
