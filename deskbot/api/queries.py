"""
GraphQL operations sent to the bookings.one batch endpoint.
"""

LIST_BOOKABLE_RESOURCES = "ResourcesListGetBookableResources"

LIST_BOOKABLE_RESOURCES_QUERY = """query ResourcesListGetBookableResources($bookableResourceType: BookableResourceTypes!, $amenityIds: [Int!], $isCombine: Boolean, $floorIds: [Int!], $categories: [BookableResourceCategories], $capacityRanges: [CapacityRangeRequest!], $availableStart: DateTimeOffset!, $availableEnd: DateTimeOffset!) {
  me {
    app {
      bookingUser {
        booking {
          bookableResource(
            bookableResourceType: $bookableResourceType
            isCombine: $isCombine
          ) {
            bookableResources(
              amenityIds: $amenityIds
              floorIds: $floorIds
              categories: $categories
              capacityRanges: $capacityRanges
            ) {
              id
              type
              name {
                language
                text
                __typename
              }
              floor {
                id
                name {
                  language
                  text
                  __typename
                }
                __typename
              }
              amenities {
                id
                name {
                  language
                  text
                  __typename
                }
                __typename
              }
              availability(start: $availableStart, end: $availableEnd) {
                status
                __typename
              }
              __typename
            }
            __typename
          }
          __typename
        }
        __typename
      }
      __typename
    }
    __typename
  }
}"""

ADD_BOOKING = "AddBooking"

ADD_BOOKING_MUTATION = """mutation AddBooking($request: BookingUserAddBookingRequest!) {
  me {
    app {
      bookingUser {
        booking {
          add(request: $request) {
            id
            bookingState
            __typename
          }
          __typename
        }
        __typename
      }
      __typename
    }
    __typename
  }
}"""

# Paths into the batch response (after the leading list index)
BOOKABLE_RESOURCES_PATH = ("data", "me", "app", "bookingUser", "booking", "bookableResource", "bookableResources")
ADD_BOOKING_PATH = ("data", "me", "app", "bookingUser", "booking", "add")
