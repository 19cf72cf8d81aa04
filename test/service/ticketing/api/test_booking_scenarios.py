from pytest_bdd import scenarios


scenarios('booking.feature')
