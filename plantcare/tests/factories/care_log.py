import factory


class CareLogPayloadFactory(factory.Factory):
    """JSON body for POST /api/plants/{id}/{kind}-logs (kind-agnostic fields)."""

    class Meta:
        model = dict

    notes = factory.Maybe(
        factory.Faker("pybool"),
        yes_declaration=factory.Faker("sentence"),
        no_declaration=None,
    )


class WateringLogPayloadFactory(CareLogPayloadFactory):
    amount = factory.Iterator(["100ml", "250ml", "1 cup", "until drained"])


class FeedingLogPayloadFactory(CareLogPayloadFactory):
    fertilizer = factory.Iterator(["liquid 10-10-10", "worm castings", "orchid feed"])
    amount = factory.Faker("random_element", elements=["5ml", "half strength", "1 tsp"])
