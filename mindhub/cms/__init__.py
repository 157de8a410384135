"""Records, clients, resolvers and builders for the headless content CMS."""