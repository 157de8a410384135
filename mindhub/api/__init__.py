"""View records and the resolver behind the API's queries, mutations and fields."""