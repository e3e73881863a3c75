"""
Labeled example phrases the priority and category classifiers are trained on.
Bump CORPUS_VERSION whenever an example is added, removed or relabeled.
"""

CORPUS_VERSION = "2"

PRIORITY_TRAINING_DATA = [
    # urgent
    ("urgent fix the production server now", "urgent"),
    ("asap send the signed contract", "urgent"),
    ("emergency call the plumber the pipe burst", "urgent"),
    ("critical outage restore the database immediately", "urgent"),
    ("immediately pick up the kids from school", "urgent"),
    ("urgent pay the overdue electricity bill", "urgent"),
    ("the site is down fix it right now", "urgent"),
    ("right away reply to the client escalation", "urgent"),
    ("critical security patch must go out now", "urgent"),
    ("emergency vet visit for the dog", "urgent"),
    ("urgent call back the hospital", "urgent"),
    ("asap renew the passport before the flight", "urgent"),
    # high
    ("important prepare the board presentation", "high"),
    ("high priority finish the quarterly report", "high"),
    ("must submit the tax return by friday", "high"),
    ("important deadline for the grant application", "high"),
    ("prepare for the job interview", "high"),
    ("finish the proposal before the deadline", "high"),
    ("important meeting with the ceo", "high"),
    ("high priority review the release checklist", "high"),
    ("need to study for the final exam", "high"),
    ("must renew the car insurance this week", "high"),
    ("important follow up with the investor", "high"),
    ("project submission is due soon", "high"),
    ("top priority onboarding the new client", "high"),
    # medium
    ("call the dentist", "medium"),
    ("schedule a meeting with the team", "medium"),
    ("write the weekly status update", "medium"),
    ("review the pull request", "medium"),
    ("book a table for dinner", "medium"),
    ("update the project documentation", "medium"),
    ("go to the gym", "medium"),
    ("buy groceries for the week", "medium"),
    ("reply to emails", "medium"),
    ("plan the sprint", "medium"),
    ("call mom", "medium"),
    ("pick up the dry cleaning", "medium"),
    ("prepare slides for the team sync", "medium"),
    ("pay the phone bill", "medium"),
    ("attend the standup meeting", "medium"),
    ("walk the dog", "medium"),
    ("read the design document", "medium"),
    ("fix the login bug", "medium"),
    ("clean the kitchen", "medium"),
    ("water the plants", "medium"),
    ("renew the library books", "medium"),
    ("send the invoice to the client", "medium"),
    ("meet john for lunch", "medium"),
    ("practice guitar", "medium"),
    ("do the laundry", "medium"),
    ("check in with the manager", "medium"),
    ("write unit tests", "medium"),
    # low
    ("someday organize the photo albums", "low"),
    ("when i have time clean the garage", "low"),
    ("low priority tidy up the bookmarks", "low"),
    ("maybe look into a new phone case", "low"),
    ("eventually learn to bake bread", "low"),
    ("optional browse new recipes", "low"),
    ("nice to have redesign the personal website", "low"),
    ("if time permits sort old emails", "low"),
    ("whenever possible watch the documentary", "low"),
    ("low priority research vacation ideas", "low"),
    ("someday read that novel", "low"),
    ("no rush rearrange the bookshelf", "low"),
]

CATEGORY_TRAINING_DATA = [
    # work
    ("schedule a meeting with the team", "work"),
    ("prepare the quarterly report for the manager", "work"),
    ("review the pull request", "work"),
    ("send the proposal to the client", "work"),
    ("deploy the release to production", "work"),
    ("write the project documentation", "work"),
    ("attend the standup meeting", "work"),
    ("fix the bug in the login service", "work"),
    ("prepare slides for the presentation", "work"),
    ("reply to the customer emails", "work"),
    ("plan the sprint with the engineering team", "work"),
    ("interview candidates for the open role", "work"),
    ("daily standup with the team", "work"),
    ("team standup every monday", "work"),
    ("standup at 10am", "work"),
    ("weekly sync every monday at 9am", "work"),
    ("standup call at the office", "work"),
    # personal
    ("call mom", "personal"),
    ("write in my journal", "personal"),
    ("plan the birthday surprise for my partner", "personal"),
    ("meditate before bed", "personal"),
    ("renew my driving license", "personal"),
    ("practice guitar", "personal"),
    ("organize the photo albums", "personal"),
    ("read a novel", "personal"),
    ("call my brother", "personal"),
    ("write thank you cards", "personal"),
    ("read a book", "personal"),
    ("read the new book before bed", "personal"),
    ("read a chapter of my book", "personal"),
    ("call grandma on sunday", "personal"),
    # health
    ("call the dentist", "health"),
    ("doctor appointment for the checkup", "health"),
    ("go to the gym", "health"),
    ("take the vitamins", "health"),
    ("go for a run in the park", "health"),
    ("book a physiotherapy session", "health"),
    ("refill the prescription at the pharmacy", "health"),
    ("yoga class", "health"),
    ("dentist cleaning appointment", "health"),
    ("schedule an eye exam", "health"),
    ("walk ten thousand steps", "health"),
    ("go to the gym every morning", "health"),
    # shopping
    ("buy groceries", "shopping"),
    ("buy milk and eggs", "shopping"),
    ("order a new laptop charger", "shopping"),
    ("pick up bread from the bakery", "shopping"),
    ("buy a birthday gift", "shopping"),
    ("shop for new running shoes", "shopping"),
    ("get dog food from the store", "shopping"),
    ("order printer ink online", "shopping"),
    ("buy vegetables at the market", "shopping"),
    ("return the jacket to the store", "shopping"),
    # finance
    ("pay the electricity bill", "finance"),
    ("pay rent", "finance"),
    ("file the tax return", "finance"),
    ("review the monthly budget", "finance"),
    ("transfer money to savings", "finance"),
    ("check the bank statement", "finance"),
    ("pay the credit card", "finance"),
    ("send the invoice", "finance"),
    ("renew the car insurance", "finance"),
    ("update the expense spreadsheet", "finance"),
    # education
    ("study for the final exam", "education"),
    ("finish the homework assignment", "education"),
    ("read chapter five of the textbook", "education"),
    ("attend the online course lecture", "education"),
    ("write the essay for class", "education"),
    ("practice spanish vocabulary", "education"),
    ("prepare for the quiz", "education"),
    ("submit the research paper", "education"),
    ("review lecture notes", "education"),
    ("watch the tutorial on machine learning", "education"),
    # household
    ("clean the kitchen", "household"),
    ("do the laundry", "household"),
    ("water the plants", "household"),
    ("take out the trash", "household"),
    ("vacuum the living room", "household"),
    ("fix the leaking faucet", "household"),
    ("mow the lawn", "household"),
    ("change the bed sheets", "household"),
    ("clean the garage", "household"),
    ("wash the dishes", "household"),
    ("water the plants every sunday", "household"),
    # social
    ("meet john for lunch", "social"),
    ("dinner with friends", "social"),
    ("go to the party on saturday", "social"),
    ("coffee with sarah", "social"),
    ("book a table for dinner", "social"),
    ("attend the wedding", "social"),
    ("invite neighbors for a barbecue", "social"),
    ("game night with friends", "social"),
    # travel
    ("book flight tickets to london", "travel"),
    ("reserve the hotel for the trip", "travel"),
    ("pack the suitcase", "travel"),
    ("renew the passport", "travel"),
    ("check in for the flight", "travel"),
    ("rent a car for the vacation", "travel"),
    ("plan the road trip itinerary", "travel"),
    ("book the train to the airport", "travel"),
    # general
    ("do the thing", "general"),
    ("remember this", "general"),
    ("follow up", "general"),
    ("check it", "general"),
    ("look into it later", "general"),
    ("take care of that", "general"),
    ("think about it", "general"),
    ("handle the stuff", "general"),
    ("sort it out", "general"),
    ("get it done", "general"),
    ("finish it", "general"),
    ("deal with it", "general"),
    ("note to self", "general"),
    ("remind me", "general"),
]
