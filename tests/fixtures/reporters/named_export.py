class SummaryReporter:
    name = "summary"

    def jasmine_done(self, result):
        self.status = result.get("overallStatus")
