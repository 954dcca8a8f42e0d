class _Recorder:
    is_module_object = True

    def jasmine_done(self, result):
        self.result = result


reporter = _Recorder()
